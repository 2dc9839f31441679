"""
Client HTTP du backend storefront (httpx).
- list_products: GET /api/products
- create_checkout_session: POST /api/create-checkout-session
- public_config: GET /api/config
Toute erreur de transport, réponse non 2xx ou réponse de forme inattendue devient NetworkError
(message du backend si disponible).
"""
import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, ValidationError

from . import config
from .cart import Product

logger = logging.getLogger(__name__)


class NetworkError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class CheckoutSession(BaseModel):
    id: str
    url: Optional[str] = None


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return f"HTTP error! status: {response.status_code}"


class StorefrontAPI:
    def __init__(self, base_url: Optional[str] = None, client: Optional[httpx.Client] = None, timeout: Optional[float] = None):
        self.base_url = (base_url if base_url is not None else config.BACKEND_URL).rstrip("/")
        self._client = client or httpx.Client(timeout=timeout or config.HTTP_TIMEOUT)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "StorefrontAPI":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error("Request %s %s failed: %s", method, url, e)
            raise NetworkError(str(e) or e.__class__.__name__) from e
        if response.is_error:
            message = _error_message(response)
            logger.error("Request %s %s returned %s: %s", method, url, response.status_code, message)
            raise NetworkError(message, status_code=response.status_code)
        try:
            return response.json()
        except ValueError as e:
            raise NetworkError(f"Invalid JSON response from {path}") from e

    def _invalid(self, path: str, detail: Any) -> NetworkError:
        logger.error("Unexpected response shape from %s: %s", path, detail)
        return NetworkError(f"Invalid response from {path}")

    def list_products(self) -> List[Product]:
        path = "/api/products"
        data = self._request("GET", path)
        if not isinstance(data, list):
            raise self._invalid(path, type(data).__name__)
        try:
            return [Product.model_validate(p) for p in data]
        except ValidationError as e:
            raise self._invalid(path, e) from e

    def create_checkout_session(self, items: List[Dict[str, Any]]) -> CheckoutSession:
        path = "/api/create-checkout-session"
        data = self._request("POST", path, json={"items": items})
        try:
            return CheckoutSession.model_validate(data)
        except ValidationError as e:
            raise self._invalid(path, e) from e

    def public_config(self) -> Dict[str, Any]:
        path = "/api/config"
        data = self._request("GET", path)
        if not isinstance(data, dict):
            raise self._invalid(path, type(data).__name__)
        return data
