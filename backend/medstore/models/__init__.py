from medstore.models.store import Store
from medstore.models.medicine import Medicine
from medstore.models.billing import Billing
from medstore.models.user import User

__all__ = ["Store", "Medicine", "Billing", "User"]
