"""Customer registration: create the auth account, then its profile row."""

from typing import Literal

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.storefront.core.errors import PlatformError
from src.storefront.core.platform.gateway import PlatformGateway

FILL_ALL_FIELDS = "Please fill all fields"
PASSWORDS_DO_NOT_MATCH = "Passwords do not match"
ACCOUNT_CREATED = "Account created. Redirecting to login."
CONFIRMATION_PENDING = (
    "Registration successful. Check your email to confirm your account, then log in."
)


class RegistrationForm(BaseModel):
    """Registration form as submitted by the storefront.

    Accepts the frontend's camelCase names (``firstName``) as well as snake_case.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    first_name: str | None = ""
    last_name: str | None = ""
    email: str | None = ""
    phone: str | None = ""
    address: str | None = ""
    password: str | None = Field(default="", repr=False)
    confirm_password: str | None = Field(default="", repr=False)
    agree_to_terms: bool | None = False
    marketing_emails: bool | None = False

    def validation_error(self) -> str | None:
        """Return the message blocking submission, or None if the form can be sent."""
        if not self.email or not self.password or not self.first_name or not self.last_name:
            return FILL_ALL_FIELDS
        if self.password != self.confirm_password:
            return PASSWORDS_DO_NOT_MATCH
        return None


class RegistrationOutcome(BaseModel):
    """Result of one registration attempt."""

    status: Literal["created", "confirmation_pending", "invalid", "failed"]
    message: str
    stage: Literal["validate", "sign_up", "profile", "unexpected"] | None = None
    redirect_to: str | None = None
    user_id: str | None = None
    orphaned_account_id: str | None = Field(
        default=None,
        description="Auth account created without a profile row",
    )


class RegistrationService:
    """Runs the two-step registration sequence.

    Step one creates the auth account; step two writes the profile row keyed
    by the returned identifier. If step two fails the account is left in
    place and reported as orphaned.
    """

    def __init__(
        self,
        gateway: PlatformGateway,
        customers_table: str = "customers",
        login_route: str = "/customer/login",
        role: str = "customer",
    ) -> None:
        self._gateway = gateway
        self._customers_table = customers_table
        self._login_route = login_route
        self._role = role

    async def register(self, form: RegistrationForm) -> RegistrationOutcome:
        message = form.validation_error()
        if message:
            return RegistrationOutcome(status="invalid", stage="validate", message=message)

        try:
            return await self._register(form)
        except Exception as exc:
            logger.exception("Unexpected error during registration")
            return RegistrationOutcome(status="failed", stage="unexpected", message=str(exc))

    async def _register(self, form: RegistrationForm) -> RegistrationOutcome:
        try:
            result = await self._gateway.sign_up(
                form.email,
                form.password,
                metadata={
                    "full_name": f"{form.first_name} {form.last_name}",
                    "role": self._role,
                },
            )
        except PlatformError as exc:
            logger.info("Sign up rejected for {}: {}", form.email, exc.message)
            return RegistrationOutcome(status="failed", stage="sign_up", message=exc.message)

        user_id = result.user_id
        if not user_id:
            # Email confirmation flow: no identifier yet, so no profile row
            logger.info("Sign up for {} awaits email confirmation", form.email)
            return RegistrationOutcome(
                status="confirmation_pending",
                message=CONFIRMATION_PENDING,
                redirect_to=self._login_route,
            )

        profile = {
            "id": user_id,
            "first_name": form.first_name,
            "last_name": form.last_name,
            "email": form.email,
            "phone": form.phone,
            "address": form.address,
            "agree_to_terms": bool(form.agree_to_terms),
            "marketing_emails": bool(form.marketing_emails),
        }
        access_token = result.session.access_token if result.session else None

        try:
            await self._gateway.insert_rows(
                self._customers_table, [profile], access_token=access_token
            )
        except Exception as exc:
            message = exc.message if isinstance(exc, PlatformError) else str(exc)
            logger.bind(orphaned_account_id=user_id).error(
                "registration.orphaned_account: profile insert failed: {}", message
            )
            return RegistrationOutcome(
                status="failed",
                stage="profile",
                message=message,
                user_id=user_id,
                orphaned_account_id=user_id,
            )

        logger.info("Registered customer {}", user_id)
        return RegistrationOutcome(
            status="created",
            message=ACCOUNT_CREATED,
            redirect_to=self._login_route,
            user_id=user_id,
        )
