"""OpenAI-compatible chat-completions client for the AI gateway."""

import logging
from dataclasses import dataclass

import httpx
from openai import APIConnectionError, APIStatusError, AsyncOpenAI, RateLimitError

from meal_scanner.domain.errors import GatewayError, GatewayErrorKind
from meal_scanner.services.vision import VisionClient

logger = logging.getLogger(__name__)

HTTP_PAYMENT_REQUIRED = 402


@dataclass
class OpenAIGatewayClient(VisionClient):
    """Vision client backed by the gateway's chat-completions endpoint."""

    client: AsyncOpenAI

    @classmethod
    def create(
        cls, api_key: str | None, base_url: str, timeout: float
    ) -> "OpenAIGatewayClient":
        """Create a gateway client; a missing key is a configuration error."""
        if not api_key:
            raise GatewayError(GatewayErrorKind.MISSING_CREDENTIAL)
        return cls(
            client=AsyncOpenAI(
                api_key=api_key,
                base_url=base_url,
                timeout=timeout,
                max_retries=0,
                http_client=httpx.AsyncClient(timeout=timeout),
            )
        )

    async def complete(
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        image_data_url: str,
    ) -> str:
        """Send one image prompt and return the assistant message text."""
        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": user_prompt},
                            {
                                "type": "image_url",
                                "image_url": {"url": image_data_url},
                            },
                        ],
                    },
                ],
            )
        except RateLimitError as exc:
            raise GatewayError(
                GatewayErrorKind.RATE_LIMITED, upstream_status=exc.status_code
            ) from exc
        except APIStatusError as exc:
            if exc.status_code == HTTP_PAYMENT_REQUIRED:
                raise GatewayError(
                    GatewayErrorKind.PAYMENT_REQUIRED, upstream_status=exc.status_code
                ) from exc
            logger.error("AI gateway error: %s %s", exc.status_code, exc.response.text)
            raise GatewayError(
                GatewayErrorKind.UPSTREAM_ERROR,
                upstream_status=exc.status_code,
                message=f"AI gateway error: {exc.status_code}",
            ) from exc
        except APIConnectionError as exc:
            logger.error("AI gateway unreachable: %s", exc)
            raise GatewayError(
                GatewayErrorKind.UPSTREAM_ERROR, message="AI gateway unreachable"
            ) from exc

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise GatewayError(
                GatewayErrorKind.UPSTREAM_ERROR, message="No response from AI"
            )
        return content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
