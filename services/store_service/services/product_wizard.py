"""Step-by-step product entry for admins.

Each admin has at most one ``ProductWizardSession``, held by a
``ProductWizardRegistry`` that the app keeps on ``app.state``. A session is
created on start, advanced one field per step, and dropped on completion,
cancel or expiry. Sessions are in-memory only; after a restart the admin
simply starts again.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional

from libs.common.datetime_utils import utc_now
from libs.common.errors import InvalidInputError, NotFoundError
from libs.common.logging import get_logger
from pydantic import ValidationError
from services.store_service.schemas import ProductCreate, ProductUpdate

logger = get_logger(__name__)

SKIP_TOKEN = "-"

# (field, prompt, optional)
WIZARD_STEPS: tuple[tuple[str, str, bool], ...] = (
    ("name", "Product name?", False),
    ("category", "Category? ('-' to skip)", True),
    ("description", "Description? ('-' to skip)", True),
    ("price", "Sale price?", False),
    ("purchase_price", "Purchase price? ('-' for 0)", True),
    ("stock", "Units in stock?", False),
    ("image_url", "Image reference from the media store? ('-' to skip)", True),
)


def _parse_amount(raw: str) -> Decimal:
    try:
        amount = Decimal(raw.replace(",", ".").replace(" ", ""))
    except InvalidOperation:
        raise InvalidInputError("Enter a number, e.g. 450 or 450.50")
    if not amount.is_finite():
        raise InvalidInputError("Enter a number, e.g. 450 or 450.50")
    return amount


def _check_field(name: str, value: Any) -> Any:
    """Validate one answer with the same constraints the product schema enforces."""
    try:
        checked = ProductUpdate.model_validate({name: value})
    except ValidationError as e:
        message = e.errors()[0]["msg"]
        raise InvalidInputError(f"Invalid {name}: {message}") from e
    return getattr(checked, name)


@dataclass
class ProductWizardSession:
    admin_id: int
    started_at: datetime = field(default_factory=utc_now)
    step_index: int = 0
    values: dict[str, Optional[str]] = field(default_factory=dict)

    @property
    def completed(self) -> bool:
        return self.step_index >= len(WIZARD_STEPS)

    @property
    def current_step(self) -> Optional[str]:
        return None if self.completed else WIZARD_STEPS[self.step_index][0]

    @property
    def prompt(self) -> Optional[str]:
        return None if self.completed else WIZARD_STEPS[self.step_index][1]

    def submit(self, raw: str) -> None:
        """Validate and record the answer for the current step, then advance.

        On invalid input the session stays on the same step.
        """
        if self.completed:
            raise InvalidInputError("Wizard already completed")

        name, _, optional = WIZARD_STEPS[self.step_index]
        value = (raw or "").strip()

        if value in ("", SKIP_TOKEN):
            if not optional:
                raise InvalidInputError(f"{name} is required")
            value = None
        else:
            if name in ("price", "purchase_price"):
                value = _parse_amount(value)
            elif name == "stock":
                try:
                    value = int(value)
                except ValueError:
                    raise InvalidInputError("Stock must be a whole number")
            value = str(_check_field(name, value))

        self.values[name] = value
        self.step_index += 1

    def to_product_create(self) -> ProductCreate:
        if not self.completed:
            raise InvalidInputError("Wizard is not finished yet")
        try:
            return ProductCreate(
                name=self.values["name"],
                category=self.values.get("category"),
                description=self.values.get("description"),
                price=Decimal(self.values["price"]),
                purchase_price=Decimal(self.values.get("purchase_price") or "0"),
                stock=int(self.values["stock"]),
                image_url=self.values.get("image_url"),
            )
        except ValidationError as e:
            fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
            raise InvalidInputError(f"Invalid product fields: {', '.join(fields)}") from e


class ProductWizardRegistry:
    """Per-admin wizard sessions with a time-to-live."""

    def __init__(
        self,
        ttl: timedelta = timedelta(minutes=60),
        clock: Callable[[], datetime] = utc_now,
    ):
        self.ttl = ttl
        self._clock = clock
        self._sessions: dict[int, ProductWizardSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def start(self, admin_id: int) -> ProductWizardSession:
        """Begin a new session, discarding any previous one for this admin."""
        if self._sessions.pop(admin_id, None) is not None:
            logger.info("Restarting product wizard for admin %s", admin_id)
        session = ProductWizardSession(admin_id=admin_id, started_at=self._clock())
        self._sessions[admin_id] = session
        return session

    def get(self, admin_id: int) -> ProductWizardSession:
        session = self._sessions.get(admin_id)
        if session is None:
            raise NotFoundError("No product wizard in progress")
        if self._clock() - session.started_at > self.ttl:
            del self._sessions[admin_id]
            logger.info("Product wizard for admin %s expired", admin_id)
            raise NotFoundError("Product wizard expired, please start again")
        return session

    def cancel(self, admin_id: int) -> bool:
        return self._sessions.pop(admin_id, None) is not None

    def finish(self, admin_id: int) -> None:
        self._sessions.pop(admin_id, None)
