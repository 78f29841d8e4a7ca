"""
Purchase-to-access fulfillment.

One Hotmart notification in, one entitlement out:

1. authenticate the shared-secret hottok
2. decode the payload (known schema versions, fail closed)
3. find the course mapped to the Hotmart product; unknown products are
   acknowledged with 200 so Hotmart stops retrying
4. reuse the account registered under the buyer email, or create one
5. upsert the enrollment (user, course)

Replays converge: the account is found by email and the enrollment upsert
is a no-op. There is no processed-event ledger; concurrent deliveries for a
brand-new buyer are arbitrated by the unique email constraint, and the loser
gets ConsistencyConflict. Steps 4 and 5 share one transaction, so a failed
enrollment never leaves an orphan account behind.

The reconciler keeps no state between calls.
"""
import logging
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError

from app.integrations import hotmart
from app.integrations.hotmart import PurchaseEvent
from app.services.errors import AlreadyRegisteredError, StoreError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Error taxonomy
# ---------------------------------------------------------------------------

class FulfillmentError(Exception):
    status_code = 500
    message = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, event: Optional[PurchaseEvent] = None):
        self.message = message or self.message
        self.event = event
        super().__init__(self.message)

    def body(self) -> dict:
        return {"error": self.message}


class MethodNotAllowed(FulfillmentError):
    status_code = 405
    message = "Method not allowed"


class Unauthorized(FulfillmentError):
    status_code = 401
    message = "Unauthorized"


class BadRequest(FulfillmentError):
    status_code = 400
    message = "Missing email or product ID"


class ConsistencyConflict(FulfillmentError):
    """The directory says the email is taken but the lookup did not find it."""
    message = "User exists but retrieval failed"


class StoreWriteFailure(FulfillmentError):
    message = "Enrollment failed"


class UnhandledException(FulfillmentError):
    message = "Internal Server Error"


# ---------------------------------------------------------------------------
# Outcome
# ---------------------------------------------------------------------------

FULFILLED = "fulfilled"
SKIPPED = "skipped"


@dataclass
class FulfillmentResult:
    outcome: str
    event: PurchaseEvent
    course_id: Optional[int] = None
    course_title: Optional[str] = None
    user_id: Optional[int] = None
    created_account: bool = False
    status_code: int = 200

    def body(self) -> dict:
        if self.outcome == SKIPPED:
            return {"message": "Course not found, skipping"}
        return {"message": "Success", "course": self.course_title, "user": self.user_id}


# ---------------------------------------------------------------------------
# Reconciler
# ---------------------------------------------------------------------------

class FulfillmentReconciler:
    """
    Reconciles a purchase notification with identity and entitlement state.

    Collaborators are injected: an identity directory (find_by_email,
    create_account), a catalog store (find_course_by_product_id), an
    entitlement store (upsert) and the transaction handle (commit, rollback)
    they share.
    """

    def __init__(
        self,
        identity,
        catalog,
        entitlements,
        transaction,
        expected_token: str,
        default_display_name: str = "Estudiante",
    ):
        self.identity = identity
        self.catalog = catalog
        self.entitlements = entitlements
        self.transaction = transaction
        self.expected_token = expected_token
        self.default_display_name = default_display_name

    def handle(self, method: str, body: Any, header_token: Optional[str] = None) -> FulfillmentResult:
        if method.upper() != "POST":
            raise MethodNotAllowed()

        if not isinstance(body, dict):
            body = {}

        if not hotmart.is_authorized(body, header_token, self.expected_token):
            logger.error("Invalid Hotmart token")
            raise Unauthorized()

        event = hotmart.decode_event(body)
        if event is None:
            raise BadRequest()

        logger.info(
            "Processing sale: email=%s product=%s transaction=%s",
            event.buyer_email, event.hotmart_product_id, event.transaction_id,
        )

        course = self.catalog.find_course_by_product_id(event.hotmart_product_id)
        if course is None:
            logger.warning("Course with hotmart_id %s not found, skipping", event.hotmart_product_id)
            return FulfillmentResult(outcome=SKIPPED, event=event)

        try:
            user_id, created = self._resolve_account(event)
            self._grant(event, user_id, course.id)
            self._commit(event)
        except FulfillmentError:
            self.transaction.rollback()
            raise

        logger.info("Enrollment succeeded: user %s -> course %s", user_id, course.title)
        return FulfillmentResult(
            outcome=FULFILLED,
            event=event,
            course_id=course.id,
            course_title=course.title,
            user_id=user_id,
            created_account=created,
        )

    def _resolve_account(self, event: PurchaseEvent) -> tuple[int, bool]:
        existing = self.identity.find_by_email(event.buyer_email)
        if existing is not None:
            logger.info("Existing user found: %s", existing.id)
            return existing.id, False

        display_name = event.buyer_name or self.default_display_name
        try:
            user = self.identity.create_account(
                email=event.buyer_email,
                display_name=display_name,
                confirmed=True,
            )
        except AlreadyRegisteredError:
            logger.error(
                "User %s exists in the directory but was not found by lookup", event.buyer_email,
            )
            raise ConsistencyConflict(event=event)
        except StoreError as e:
            logger.error("Error creating user %s: %s", event.buyer_email, e)
            raise StoreWriteFailure(str(e), event=event)

        logger.info("New user created: %s", user.id)
        return user.id, True

    def _grant(self, event: PurchaseEvent, user_id: int, course_id: int) -> None:
        try:
            self.entitlements.upsert(user_id, course_id)
        except StoreError as e:
            logger.error("Enrollment failed for user %s course %s: %s", user_id, course_id, e)
            raise StoreWriteFailure(event=event)

    def _commit(self, event: PurchaseEvent) -> None:
        try:
            self.transaction.commit()
        except SQLAlchemyError as e:
            logger.error("Commit failed for %s: %s", event.buyer_email, e)
            raise StoreWriteFailure(event=event)
