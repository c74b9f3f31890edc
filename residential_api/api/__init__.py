"""
HTTP routers, one per entity.
"""
