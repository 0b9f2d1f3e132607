"""
Enumerations shared by the marketplace models.

Values are the lowercase strings clients send and receive on the wire.
"""

import enum


class UserRole(str, enum.Enum):
    """
    User role enumeration.

    Roles:
        USER: Customer who books parcels (default for new sign-ins)
        ADMIN: Assigns riders, approves applications, manages roles
        RIDER: Approved courier; granted only through rider activation
    """
    USER = "user"
    ADMIN = "admin"
    RIDER = "rider"


class PaymentStatus(str, enum.Enum):
    UNPAID = "unpaid"
    PAID = "paid"


class DeliveryStatus(str, enum.Enum):
    """
    Parcel delivery status.

    Status flow:
        PENDING → RIDER_ASSIGNED → IN_TRANSIT → DELIVERED → WIREHOUSE_DELIVERED

    Ordering is not enforced; only the side effects of individual
    transitions are (see services.parcel_lifecycle).
    """
    PENDING = "pending"
    RIDER_ASSIGNED = "rider_assigned"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    WIREHOUSE_DELIVERED = "wirehouse_delivered"


class CashoutStatus(str, enum.Enum):
    NOT_CASHED_OUT = "not_cashed_out"
    CASHED_OUT = "cashed_out"


class RiderStatus(str, enum.Enum):
    """Rider application status. Only an admin moves a rider out of PENDING."""
    PENDING = "pending"
    ACTIVE = "active"
    DEACTIVATED = "deactivated"


class WorkStatus(str, enum.Enum):
    AVAILABLE = "available"
    IN_DELIVERY = "in_delivery"
    NOT_AVAILABLE = "not_available"


class ParcelType(str, enum.Enum):
    DOCUMENT = "document"
    NON_DOCUMENT = "non-document"


# Delivery statuses during which the assigned rider is busy
ACTIVE_DELIVERY_STATUSES = (DeliveryStatus.RIDER_ASSIGNED, DeliveryStatus.IN_TRANSIT)

# Delivery statuses that count as completed for the rider
COMPLETED_DELIVERY_STATUSES = (DeliveryStatus.DELIVERED, DeliveryStatus.WIREHOUSE_DELIVERED)


def enum_values(enum_cls):
    """Persist enum values (not member names) so stored data matches the wire format."""
    return [member.value for member in enum_cls]
