# Import every model so the mappers resolve and Base.metadata is complete
from app.core.db.session import Base  # noqa: F401
from app.user.models import User  # noqa: F401
from app.product.models import Product  # noqa: F401
from app.order.models import Order  # noqa: F401
from app.membership.models import Membership  # noqa: F401
from app.payout.models import Payout  # noqa: F401
