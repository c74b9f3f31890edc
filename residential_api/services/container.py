from residential_api.config import get_config
from residential_api.services.auth_service import AuthService
from residential_api.services.resident_service import ResidentService
from residential_api.services.service_provider_service import ServiceProviderService
from residential_api.services.employee_service import EmployeeService
from residential_api.services.vehicle_service import VehicleService
from residential_api.services.complaint_service import ComplaintService
from residential_api.services.booking_service import BookingService
from residential_api.services.bill_service import BillService
from residential_api.services.guest_service import GuestService
from residential_api.services.delivery_service import DeliveryService
from residential_api.services.gate_entry_service import GateEntryService
from residential_api.services.announcement_service import AnnouncementService
from residential_api.services.dashboard_service import DashboardService

config = get_config()

# Initialize services
auth_service = AuthService(config)
resident_service = ResidentService(config)
service_provider_service = ServiceProviderService(config)
employee_service = EmployeeService(config)
vehicle_service = VehicleService(config)
complaint_service = ComplaintService(config)
booking_service = BookingService(config)
bill_service = BillService(config)
guest_service = GuestService(config)
delivery_service = DeliveryService(config)
gate_entry_service = GateEntryService(config)
announcement_service = AnnouncementService(config)
dashboard_service = DashboardService(config)
