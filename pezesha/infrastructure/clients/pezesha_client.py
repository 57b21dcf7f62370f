"""HTTP client for the Pezesha lending API."""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Generator, List, Mapping, Optional
from urllib.parse import quote

import httpx
import structlog
from pydantic import ValidationError

from pezesha.core.config import PezeshaSettings, get_settings
from pezesha.core.metrics import (
    track_api_latency,
    record_api_success,
    record_api_failure,
    record_authentication,
    record_validation_failure,
)
from pezesha.domain.entities import (
    LoanApplication,
    StkPushRequest,
    TransactionBatch,
    UserRegistration,
    UserType,
    require_flag,
    require_page,
    require_text,
    validate_payload,
)
from pezesha.domain.exceptions import (
    AuthenticationException,
    ConfigurationException,
    InvalidResponseException,
    TransportException,
    TransportTimeoutException,
    ValidationException,
)
from .session import TokenSession

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Endpoint:
    """A fixed Pezesha route and the field its response must carry."""

    name: str
    method: str
    path: str
    label: str
    marker: str = "status"


AUTHENTICATE = Endpoint("authenticate", "POST", "/oauth/token", "Authentication", "access_token")
REGISTER_USER = Endpoint("register_user", "POST", "/mfi/v1/borrowers", "User registration", "customer_id")
TERMS = Endpoint("handle_terms", "POST", "/mfi/v1/borrowers/terms", "Terms operation")
OPT_OUT = Endpoint("opt_out", "POST", "/mfi/v1/borrowers/opt_out", "Opt-out operation")
UPLOAD_DATA = Endpoint("upload_transactions", "POST", "/mfi/v1.1/data", "Data upload")
LOAN_OFFERS = Endpoint("loan_offers", "POST", "/mfi/v1/borrowers/options", "Loan offers request")
APPLY_LOAN = Endpoint("apply_loan", "POST", "/mfi/v1/borrowers/loans", "Loan application")
LOAN_STATUS = Endpoint("loan_status", "POST", "/mfi/v1/borrowers/loan/status", "Loan status request")
LOAN_HISTORY = Endpoint("loan_history", "POST", "/mfi/v1/borrowers/statement", "Loan history request")
ACTIVE_LOANS = Endpoint(
    "active_loans", "GET", "/mfi/v1/borrowers/active/{merchant_key}", "Active loans request"
)
# Path spelling matches the remote API
REPAYMENT_SCHEDULE = Endpoint(
    "repayment_schedule",
    "GET",
    "/mfi/v1/borrowers/repayment-shedules",
    "Loan repayment schedule request",
)
STK_PUSH = Endpoint("stk_push", "POST", "/mfi/v2/mpesa/stk", "STK push request")


class PezeshaClient:
    """
    Client for the Pezesha lending API.

    Every business call validates its input, authenticates on first
    use, sends one request and returns the decoded JSON body as-is.
    Expired tokens are not detected; a rejected token surfaces as a
    TransportException with status 401.
    """

    def __init__(
        self,
        transport: httpx.BaseTransport | None = None,
        config: Mapping[str, Any] | None = None,
    ):
        """
        Args:
            transport: Replacement httpx transport, e.g. httpx.MockTransport
            config: Per-instance values for client_id, client_secret,
                base_url, channel, timeout and verify_ssl. Missing keys
                fall back to PEZESHA_* settings.

        Raises:
            ConfigurationException: If channel, client_id, client_secret
                or base_url is empty, or a value has the wrong type
        """
        settings = self._resolve_settings(config or {})

        self._client_id = settings.client_id
        self._client_secret = settings.client_secret
        self._base_url = settings.base_url
        self._channel = settings.channel
        self._timeout = settings.timeout
        verify_ssl = settings.verify_ssl

        if not self._channel:
            raise ConfigurationException(
                "channel",
                "Pezesha channel is not configured. Contact Pezesha support for assistance.",
            )
        if not self._client_id:
            raise ConfigurationException(
                "client_id",
                "Pezesha client ID is not configured. Contact Pezesha support to get one.",
            )
        if not self._client_secret:
            raise ConfigurationException(
                "client_secret",
                "Pezesha client secret is not configured. Contact Pezesha support to get one.",
            )
        if not self._base_url:
            raise ConfigurationException(
                "base_url",
                "Pezesha base URL is not configured. Set PEZESHA_BASE_URL or pass base_url.",
            )

        if not verify_ssl:
            logger.warning("pezesha_tls_verification_disabled", base_url=self._base_url)

        self._session = TokenSession()
        self._http = httpx.Client(
            base_url=self._base_url,
            timeout=self._timeout,
            verify=verify_ssl,
            transport=transport,
        )

    @staticmethod
    def _resolve_settings(config: Mapping[str, Any]) -> PezeshaSettings:
        """Layer per-instance values over PEZESHA_* settings and parse them."""
        overrides = {
            key: value
            for key, value in config.items()
            if key in PezeshaSettings.model_fields and value is not None
        }
        try:
            return PezeshaSettings(**{**get_settings().model_dump(), **overrides})
        except ValidationError as e:
            error = e.errors()[0]
            field = ".".join(str(part) for part in error["loc"])
            raise ConfigurationException(
                field,
                f"Invalid Pezesha setting {field}: {error['msg']}",
            ) from e

    def __enter__(self) -> "PezeshaClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying connection pool."""
        self._http.close()

    @property
    def access_token(self) -> Optional[str]:
        """The bearer token currently held, or None before authentication."""
        return self._session.token

    @property
    def channel(self) -> str:
        return self._channel

    # =========================================================================
    # Authentication
    # =========================================================================

    def authenticate(self) -> Dict[str, Any]:
        """
        Request a bearer token with the client credentials grant.

        The token is stored only when the response carries one.

        Returns:
            The decoded token response

        Raises:
            AuthenticationException: On any transport fault or a response
                without a non-empty access_token
        """
        payload = {
            "grant_type": "client_credentials",
            "provider": "users",
            "client_id": self._client_id,
            "client_secret": self._client_secret,
        }

        try:
            result = self._send(AUTHENTICATE, json=payload)
        except (TransportException, InvalidResponseException) as e:
            record_authentication(False)
            logger.warning("pezesha_authentication_failed", error=e.message)
            raise AuthenticationException(e.message) from e

        token = result["access_token"]
        if not isinstance(token, str) or not token:
            record_authentication(False)
            logger.warning("pezesha_authentication_failed", error="empty access_token")
            raise AuthenticationException("Authentication failed: Invalid response format")

        self._session.store(token)
        record_authentication(True)
        logger.info("pezesha_authenticated", expires_in=result.get("expires_in"))
        return result

    def ensure_authenticated(self) -> str:
        """Authenticate unless a token is already held, then return it."""
        return self._session.ensure(self.authenticate)

    # =========================================================================
    # Registration and consent
    # =========================================================================

    def register_user(
        self,
        user_data: Mapping[str, Any],
        user_type: UserType | str = UserType.BORROWER,
    ) -> Dict[str, Any]:
        """
        Register a borrower, merchant or agent.

        The channel is always set by the client. other_phone_nos,
        geo_location and meta_data default to empty values. The user
        type is not part of the request body; all types share one
        endpoint.

        Raises:
            ValidationException: If a required field is missing or malformed
        """
        with self._validation(REGISTER_USER):
            try:
                user_type = UserType(user_type)
            except ValueError as e:
                raise ValidationException(
                    field="user_type",
                    message=f"user_type must be one of: {', '.join(t.value for t in UserType)}",
                ) from e
            user = validate_payload(UserRegistration, user_data, "user_data", channel=self._channel)

        logger.info("pezesha_registering_user", user_type=user_type.value)
        return self._call(REGISTER_USER, json=user.model_dump())

    def register_borrower(self, user_data: Mapping[str, Any]) -> Dict[str, Any]:
        return self.register_user(user_data, UserType.BORROWER)

    def register_merchant(self, user_data: Mapping[str, Any]) -> Dict[str, Any]:
        return self.register_user(user_data, UserType.MERCHANT)

    def register_agent(self, user_data: Mapping[str, Any]) -> Dict[str, Any]:
        return self.register_user(user_data, UserType.AGENT)

    def handle_terms(self, identifier: str, terms: bool) -> Dict[str, Any]:
        """
        Accept or decline the Pezesha terms for a user.

        Args:
            identifier: Merchant ID or national ID
            terms: True to accept, False to decline
        """
        with self._validation(TERMS):
            require_text("identifier", identifier)
            require_flag("terms", terms)

        return self._call(
            TERMS,
            json={"channel": self._channel, "identifier": identifier, "terms": terms},
        )

    def accept_terms(self, identifier: str) -> Dict[str, Any]:
        return self.handle_terms(identifier, True)

    def decline_terms(self, identifier: str) -> Dict[str, Any]:
        return self.handle_terms(identifier, False)

    def opt_out(self, identifier: str) -> Dict[str, Any]:
        """Remove a merchant from the Pezesha ecosystem."""
        with self._validation(OPT_OUT):
            require_text("identifier", identifier)

        return self._call(OPT_OUT, json={"channel": self._channel, "identifier": identifier})

    # =========================================================================
    # Credit data and loans
    # =========================================================================

    def upload_transactions(
        self,
        identifier: str,
        transactions: List[Mapping[str, Any]],
        other_details: Optional[Any] = None,
    ) -> Dict[str, Any]:
        """
        Upload a merchant's historical transactions for scoring.

        Args:
            identifier: Merchant ID or national ID
            transactions: 1 to 200 transaction records
            other_details: Extra information requested by the scoring
                team, sent through unchanged (defaults to [])

        Raises:
            ValidationException: On an empty or oversized batch, or the
                first malformed record
        """
        with self._validation(UPLOAD_DATA):
            require_text("identifier", identifier)
            batch = validate_payload(TransactionBatch, {"transactions": transactions}, "transactions")
            if other_details is None:
                other_details = []
            elif not isinstance(other_details, (list, dict)):
                raise ValidationException(
                    field="other_details",
                    message="other_details must be a list or an object",
                )

        return self._call(
            UPLOAD_DATA,
            json={
                "channel": self._channel,
                "identifier": identifier,
                "transactions": batch.to_payload(),
                "other_details": other_details,
            },
        )

    def get_loan_offers(self, identifier: str) -> Dict[str, Any]:
        """Get the loan limit and options a merchant currently qualifies for."""
        with self._validation(LOAN_OFFERS):
            require_text("identifier", identifier)

        return self._call(LOAN_OFFERS, json={"channel": self._channel, "identifier": identifier})

    def apply_loan(self, pezesha_id: str, loan_details: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Apply for a loan on behalf of a registered user.

        Args:
            pezesha_id: ID returned by registration
            loan_details: amount, duration, interest, rate, fee and
                payment_details {type, number, callback_url}, all strings
        """
        with self._validation(APPLY_LOAN):
            require_text("pezesha_id", pezesha_id)
            loan = validate_payload(LoanApplication, loan_details, "loan_details")

        payload = loan.model_dump()
        payload.update({"channel": self._channel, "pezesha_id": pezesha_id})
        return self._call(APPLY_LOAN, json=payload)

    def get_loan_status(self, identifier: str) -> Dict[str, Any]:
        """
        Get the status of a user's latest loan.

        Statuses reported by the API: Processing, Score, Funding,
        Funded, Paid, Cancelled, Late.
        """
        with self._validation(LOAN_STATUS):
            require_text("identifier", identifier)

        return self._call(LOAN_STATUS, json={"channel": self._channel, "identifier": identifier})

    def get_loan_history(self, identifier: str, page: int = 1) -> Dict[str, Any]:
        """Get one page of a borrower's loan statement."""
        with self._validation(LOAN_HISTORY):
            require_text("identifier", identifier)
            require_page("page", page)

        return self._call(
            LOAN_HISTORY,
            json={"channel": self._channel, "identification": identifier, "page": page},
        )

    def get_active_loans(self, merchant_key: str) -> Dict[str, Any]:
        with self._validation(ACTIVE_LOANS):
            require_text("merchant_key", merchant_key)

        path = ACTIVE_LOANS.path.format(merchant_key=quote(merchant_key, safe=""))
        return self._call(ACTIVE_LOANS, path=path)

    def get_repayment_schedule(self, merchant_id: str) -> Dict[str, Any]:
        """
        Get the repayment schedule for a merchant's loan.

        Statuses reported by the API: Active on Schedule, Paid, Overdue.
        """
        with self._validation(REPAYMENT_SCHEDULE):
            require_text("merchant_id", merchant_id)

        return self._call(
            REPAYMENT_SCHEDULE,
            params={"channel": self._channel, "merchant_id": merchant_id},
        )

    # =========================================================================
    # Payments
    # =========================================================================

    def initiate_stk_push(self, amount: str, phone: str, account: str) -> Dict[str, Any]:
        """
        Prompt a merchant's phone to pay into an account via M-Pesa.

        Args:
            amount: Numeric string, e.g. "1000"
            phone: +254XXXXXXXXX
            account: Account the funds are directed to
        """
        with self._validation(STK_PUSH):
            request = validate_payload(
                StkPushRequest,
                {"amount": amount, "phone": phone, "account": account},
                "stk_push",
            )

        return self._call(STK_PUSH, json=request.model_dump())

    # =========================================================================
    # Internals
    # =========================================================================

    @contextmanager
    def _validation(self, endpoint: Endpoint) -> Generator[None, None, None]:
        """Record and log validation failures for an operation."""
        try:
            yield
        except ValidationException as e:
            record_validation_failure(endpoint.name)
            logger.warning(
                "pezesha_validation_failed",
                operation=endpoint.name,
                field=e.field,
                error=e.message,
            )
            raise

    def _call(self, endpoint: Endpoint, **kwargs: Any) -> Dict[str, Any]:
        token = self.ensure_authenticated()
        return self._send(endpoint, token=token, **kwargs)

    def _send(
        self,
        endpoint: Endpoint,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        path: Optional[str] = None,
        token: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Send one request and check the response carries the endpoint's marker.

        Raises:
            ValidationException: If the body cannot be encoded as JSON
            TransportTimeoutException: If the request times out
            TransportException: On network faults and non-2xx statuses
            InvalidResponseException: If the body is not a JSON object
                holding the marker field
        """
        headers = {"Content-Type": "application/json"}
        if token is not None:
            headers["Authorization"] = f"Bearer {token}"

        log = logger.bind(
            operation=endpoint.name,
            method=endpoint.method,
            path=endpoint.path,
        )

        try:
            request = self._http.build_request(
                endpoint.method,
                path or endpoint.path,
                json=json,
                params=params,
                headers=headers,
            )
        except (TypeError, ValueError) as e:
            record_validation_failure(endpoint.name)
            log.warning("pezesha_validation_failed", field="payload", error=str(e))
            raise ValidationException(
                field="payload",
                message=f"{endpoint.label} failed: request body is not valid JSON: {e}",
            ) from e

        try:
            with track_api_latency(endpoint.name):
                response = self._http.send(request)
                response.raise_for_status()
        except httpx.TimeoutException as e:
            record_api_failure(endpoint.name, "timeout")
            log.warning("pezesha_request_failed", error_type="timeout")
            raise TransportTimeoutException(
                f"{endpoint.label} failed: request timed out after {self._timeout}s"
            ) from e
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            record_api_failure(endpoint.name, "http_error")
            log.warning("pezesha_request_failed", error_type="http_error", status_code=status_code)
            raise TransportException(
                f"{endpoint.label} failed: HTTP {status_code}: {e.response.text[:200]}",
                status_code=status_code,
            ) from e
        except httpx.HTTPError as e:
            record_api_failure(endpoint.name, "transport_error")
            log.error("pezesha_request_failed", error_type="transport_error", error=str(e))
            raise TransportException(f"{endpoint.label} failed: {e}") from e

        try:
            result = response.json()
        except ValueError:
            result = None

        if not isinstance(result, dict) or result.get(endpoint.marker) is None:
            record_api_failure(endpoint.name, "invalid_response")
            log.warning(
                "pezesha_request_failed",
                error_type="invalid_response",
                status_code=response.status_code,
            )
            raise InvalidResponseException(f"{endpoint.label} failed: Invalid response format")

        record_api_success(endpoint.name)
        log.info("pezesha_request_completed", status_code=response.status_code)
        return result
