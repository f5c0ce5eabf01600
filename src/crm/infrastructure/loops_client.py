"""HTTP client for syncing contacts to Loops.so."""
import logging
from typing import Optional

import httpx
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.crm.config import LoopsSettings

logger = logging.getLogger(__name__)

CREATE_CONTACT_PATH = "/contacts/create"


class LoopsContactRequest(BaseModel):
    """Body of a Loops create-contact call."""
    email: str
    first_name: str | None = None
    last_name: str | None = None
    source: str | None = None
    subscribed: bool = True
    user_group: str | None = None
    user_id: str | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LoopsContactResponse(BaseModel):
    """Body Loops returns for a create-contact call."""
    success: bool = False
    id: str | None = None
    message: str | None = None


def create_loops_http_client(settings: LoopsSettings) -> httpx.AsyncClient:
    """
    Factory function to create the pooled HTTP client used for Loops calls.

    The base URL and per-call timeout come from settings so every request made
    through the client inherits them.
    """
    return httpx.AsyncClient(
        base_url=settings.base_url,
        timeout=httpx.Timeout(settings.timeout_seconds),
    )


class LoopsClient:
    """
    Best-effort client for the Loops.so contacts API.

    create_contact never raises: disabled configuration, a missing API key,
    non-success responses, timeouts and transport errors all come back as False
    and are reported through logging only. There is no retry.
    """

    def __init__(self, settings: LoopsSettings, http_client: httpx.AsyncClient):
        """
        Initialize the Loops client.

        Args:
            settings: Loops configuration (switch, key, source tag, timeout)
            http_client: httpx.AsyncClient whose base_url points at the Loops API
        """
        self.settings = settings
        self.http_client = http_client

    async def create_contact(
        self,
        email: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> bool:
        """
        Create a contact in Loops.so.

        Args:
            email: Contact email address
            first_name: Optional first name
            last_name: Optional last name
            user_id: Optional identifier of the contact in this system

        Returns:
            True if Loops accepted the contact, False otherwise
        """
        if not self.settings.enabled:
            logger.debug("Loops.so integration is disabled. Skipping contact creation for %s", email)
            return False

        api_key = self.settings.api_key
        if not api_key or not api_key.strip():
            logger.warning("Loops.so API key is not configured. Cannot create contact for %s", email)
            return False

        try:
            request = LoopsContactRequest(
                email=email,
                first_name=first_name,
                last_name=last_name,
                user_id=user_id,
                source=self.settings.default_source,
                subscribed=True,
            )

            logger.info("Creating contact in Loops.so for %s", email)
            response = await self.http_client.post(
                CREATE_CONTACT_PATH,
                json=request.model_dump(by_alias=True, exclude_none=True),
                headers={"Authorization": f"Bearer {api_key}"},
                timeout=self.settings.timeout_seconds,
            )

            if not response.is_success:
                logger.warning(
                    "Failed to create contact in Loops.so for %s. Status: %d, Response: %s",
                    email,
                    response.status_code,
                    response.text,
                )
                return False

            message = self._parse_message(response)
            logger.info("Successfully created contact in Loops.so for %s. Response: %s", email, message)
            return True

        except httpx.TimeoutException as e:
            logger.error("Request timeout while creating contact in Loops.so for %s: %s", email, e)
            return False
        except httpx.HTTPError as e:
            logger.error("HTTP error while creating contact in Loops.so for %s: %s", email, e)
            return False
        except Exception as e:
            logger.exception("Unexpected error while creating contact in Loops.so for %s: %s", email, e)
            return False

    @staticmethod
    def _parse_message(response: httpx.Response) -> str | None:
        """Pull the message field out of a Loops response, tolerating odd bodies."""
        try:
            return LoopsContactResponse.model_validate(response.json()).message
        except ValueError:
            return None

    async def aclose(self) -> None:
        await self.http_client.aclose()
