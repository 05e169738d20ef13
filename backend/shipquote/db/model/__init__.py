# Aggregate model imports so Alembic sees every table

from .pincode import Pincode
from .shipping_rate import ShippingWeightSlab, ShippingZoneRate
from .insurance import ShippingInsurance
from .admin_setting import AdminSetting

__all__ = [
    # location
    "Pincode",
    # rates
    "ShippingWeightSlab", "ShippingZoneRate",
    # others
    "ShippingInsurance", "AdminSetting",
]
