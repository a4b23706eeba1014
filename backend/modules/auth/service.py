"""
Authentication service implementation.

Orchestrates email registration and login, and the phone one-time-code
flow, against the credential store, password hasher, OTP manager and
token issuer.

Phone identities move through Unverified -> OTPIssued -> Verified. A code
that outlives its TTL is Expired and is consumed on the next verify
attempt; sending a new code re-enters OTPIssued. Two concurrent sends for
the same phone race on the stored digest and expiry and the last write
wins.
"""

import asyncio
import functools
import logging
import re
from datetime import datetime
from typing import Awaitable, Callable, Optional, TypeVar

from email_validator import EmailNotValidError, validate_email

from modules.users.exceptions import DuplicateIdentityError
from modules.users.interfaces import ICredentialStore
from modules.users.models import Gender, User, utc_now
from shared.exceptions import CitizoneError, InternalError

from .exceptions import (
    AccountBlockedError,
    InvalidAgeError,
    InvalidCredentialsError,
    InvalidEmailError,
    InvalidGenderError,
    InvalidOTPError,
    InvalidPhoneError,
    InvalidTokenError,
    MissingFieldError,
    NameRequiredError,
    OTPExpiredError,
    PasswordMismatchError,
    WeakPasswordError,
)
from .interfaces import IAuthService, ISmsSender
from .models import (
    EmailLoginResult,
    LoginEmailRequest,
    OTPSent,
    OTPVerificationResult,
    RefreshedToken,
    RegisterEmailRequest,
    RegisteredUser,
    SendOTPRequest,
    VerifyOTPRequest,
)
from .otp import OTPManager
from .passwords import PasswordHasher
from .sms import mask_phone
from .tokens import TokenIssuer

logger = logging.getLogger(__name__)

PHONE_PATTERN = re.compile(r"[0-9]{10}")
MIN_AGE = 18
MIN_PASSWORD_LENGTH = 6
OTP_SENT_MESSAGE = "OTP sent successfully via sms"

R = TypeVar("R")


def guarded(operation: str):
    """
    Map unexpected faults in a service operation to InternalError.

    Domain errors (CitizoneError) pass through untouched.
    """

    def decorator(func: Callable[..., Awaitable[R]]) -> Callable[..., Awaitable[R]]:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> R:
            try:
                return await func(*args, **kwargs)
            except CitizoneError:
                raise
            except Exception as e:
                logger.exception(f"Unexpected failure in {operation}")
                raise InternalError(details={"operation": operation}) from e

        return wrapper

    return decorator


def is_valid_phone(phone: Optional[str]) -> bool:
    return bool(phone) and PHONE_PATTERN.fullmatch(phone) is not None


class AuthService(IAuthService):
    """
    Implementation of the authentication service.

    Passwords are hashed here, exactly once per new password, before the
    store sees the record; the store itself applies no policy.
    """

    def __init__(
        self,
        store: ICredentialStore,
        hasher: PasswordHasher,
        otp: OTPManager,
        tokens: TokenIssuer,
        sms: ISmsSender,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._store = store
        self._hasher = hasher
        self._otp = otp
        self._tokens = tokens
        self._sms = sms
        self._clock = clock

    # -------------------------------------------------------------------------
    # Email flow
    # -------------------------------------------------------------------------

    @guarded("register_by_email")
    async def register_by_email(self, request: RegisterEmailRequest) -> RegisteredUser:
        """Register a new user with email and password."""
        required = {
            "firstName": request.first_name,
            "lastName": request.last_name,
            "age": request.age,
            "gender": request.gender,
            "email": request.email,
            "password": request.password,
            "confirmPassword": request.confirm_password,
        }
        missing = [name for name, value in required.items() if value is None or value == ""]
        if missing:
            raise MissingFieldError(fields=missing)

        if request.password != request.confirm_password:
            raise PasswordMismatchError()

        email = self._normalize_email(request.email)

        if request.age < MIN_AGE:
            raise InvalidAgeError()
        try:
            gender = Gender(request.gender.lower())
        except ValueError:
            raise InvalidGenderError()
        if len(request.password) < MIN_PASSWORD_LENGTH:
            raise WeakPasswordError(MIN_PASSWORD_LENGTH)

        if self._store.find_by_email(email) is not None:
            raise DuplicateIdentityError("email")

        password_hash = await self._hasher.hash(request.password)
        user = self._store.create(
            User(
                first_name=request.first_name,
                last_name=request.last_name,
                age=request.age,
                gender=gender,
                email=email,
                password_hash=password_hash,
                registered_at=self._clock(),
            )
        )
        logger.info(f"Registered user {user.id} by email")

        return RegisteredUser(
            id=user.id,
            name=user.full_name,
            age=user.age,
            gender=user.gender.value,
            email=user.email,
            created_at=user.registered_at,
        )

    @guarded("login_by_email")
    async def login_by_email(self, request: LoginEmailRequest) -> EmailLoginResult:
        """
        Authenticate with email and password.

        Unknown email and wrong password fail identically, and both pay for
        one bcrypt check. A blocked account is reported as blocked.
        """
        if not request.email or not request.password:
            raise MissingFieldError("Email and password are required", ["email", "password"])

        user = self._store.find_by_email(request.email.strip().lower())
        if user is None:
            await self._hasher.compare(request.password, None)
            logger.info("Email login rejected: invalid credentials")
            raise InvalidCredentialsError()

        if user.is_blocked:
            logger.warning(f"Email login refused for blocked user {user.id}")
            raise AccountBlockedError()

        if not user.can_use_password:
            await self._hasher.compare(request.password, None)
            logger.info(f"Email login rejected: user {user.id} has no password")
            raise InvalidCredentialsError()

        if not await self._hasher.compare(request.password, user.password_hash):
            logger.info("Email login rejected: invalid credentials")
            raise InvalidCredentialsError()

        user = self._store.save(user.logged_in(self._clock()))
        grant = self._tokens.issue(user)
        logger.info(f"User {user.id} logged in by email")

        return EmailLoginResult(
            id=user.id,
            email=user.email,
            last_login=user.last_login,
            token=grant.token,
            expires_at=grant.expires_at,
            user=grant.user,
        )

    # -------------------------------------------------------------------------
    # Phone flow
    # -------------------------------------------------------------------------

    @guarded("mobile_auth")
    async def mobile_auth(self, request: SendOTPRequest) -> OTPSent:
        """
        Issue a one-time code for a phone number.

        First-time phones need a name and get a password-less user. Delivery
        failures are logged and never reported to the caller.
        """
        phone = request.phone
        if not is_valid_phone(phone):
            raise InvalidPhoneError()

        user = self._store.find_by_phone(phone)
        if user is None and not request.name:
            raise NameRequiredError()

        challenge = await asyncio.to_thread(self._otp.issue)

        if user is None:
            user = self._create_phone_user(phone, request.name, challenge.digest, challenge.expires_at)
        else:
            user = self._store.save(user.with_otp(challenge.digest, challenge.expires_at))
        logger.info(f"Issued OTP for {mask_phone(phone)} (user {user.id})")

        await self._deliver(phone, challenge.code)
        return OTPSent(message=OTP_SENT_MESSAGE)

    @guarded("verify_otp")
    async def verify_otp(self, request: VerifyOTPRequest) -> OTPVerificationResult:
        """
        Consume a pending code.

        Unknown phone and no pending code fail identically. An expired code
        is cleared before failing; a wrong code leaves the pending code in
        place.
        """
        if not request.phone or not request.otp:
            raise MissingFieldError("Phone and OTP are required", ["phone", "otp"])

        user = self._store.find_by_phone(request.phone)
        if user is None or not user.has_pending_otp:
            raise InvalidOTPError()

        now = self._clock()
        if self._otp.is_expired(user.phone_otp_expires_at, now):
            self._store.save(user.without_otp())
            logger.info(f"Expired OTP consumed for {mask_phone(request.phone)}")
            raise OTPExpiredError()

        matches = await asyncio.to_thread(
            self._otp.verify,
            request.otp,
            user.phone_otp_hash,
            user.phone_otp_expires_at,
            now,
        )
        if not matches:
            logger.info(f"Incorrect OTP for {mask_phone(request.phone)}")
            raise InvalidOTPError("Incorrect OTP")

        user = self._store.save(user.without_otp().logged_in(now))
        grant = self._tokens.issue(user)
        logger.info(f"User {user.id} verified by OTP")

        return OTPVerificationResult(
            id=user.id,
            phone=user.phone,
            registered_at=user.registered_at,
            token=grant.token,
            expires_at=grant.expires_at,
            user=grant.user,
        )

    # -------------------------------------------------------------------------
    # Session refresh
    # -------------------------------------------------------------------------

    @guarded("refresh_session")
    async def refresh_session(self, token: str) -> RefreshedToken:
        """Exchange a recent token (expired within the grace window) for a new one."""
        claims = self._tokens.decode(token, allow_expired_for_refresh=True)

        user = self._store.find_by_id(claims.sub)
        if user is None:
            raise InvalidTokenError("Session user no longer exists")
        if user.is_blocked:
            raise AccountBlockedError()

        grant = self._tokens.issue(user)
        logger.debug(f"Refreshed session for user {user.id}")
        return RefreshedToken(token=grant.token, expires_at=grant.expires_at)

    # -------------------------------------------------------------------------
    # Helper methods
    # -------------------------------------------------------------------------

    def _normalize_email(self, raw: str) -> str:
        try:
            result = validate_email(raw, check_deliverability=False)
        except EmailNotValidError:
            raise InvalidEmailError()
        return result.normalized.lower()

    def _create_phone_user(
        self,
        phone: str,
        name: str,
        digest: str,
        expires_at: datetime,
    ) -> User:
        first_name, _, last_name = name.strip().partition(" ")
        try:
            return self._store.create(
                User(
                    first_name=first_name,
                    last_name=last_name.strip() or None,
                    phone=phone,
                    registered_at=self._clock(),
                    phone_otp_hash=digest,
                    phone_otp_expires_at=expires_at,
                )
            )
        except DuplicateIdentityError:
            # A concurrent send created this phone first; overwrite its code
            existing = self._store.find_by_phone(phone)
            if existing is None:
                raise
            return self._store.save(existing.with_otp(digest, expires_at))

    async def _deliver(self, phone: str, code: str) -> None:
        try:
            receipt = await self._sms.send(phone, code)
        except Exception:
            logger.exception(f"SMS delivery to {mask_phone(phone)} raised")
            return
        if not receipt.accepted:
            logger.warning(f"SMS delivery to {mask_phone(phone)} failed: {receipt.error}")
