"""HTTP gateway for a PostgREST-style remote store."""
import logging
from typing import Any, Dict, List, Optional

import requests

from possync.exceptions import RemoteFailure
from possync.gateway.base import RemoteGateway

logger = logging.getLogger(__name__)


class HttpRemoteGateway(RemoteGateway):
    """
    Client for the remote store REST API.

    Tables are served under /rest/v1/<table> and compound operations under
    /rest/v1/rpc/<function>, each of which runs in a single database
    transaction on the server.
    """

    REST_PATH = '/rest/v1'

    def __init__(self, base_url: str, api_key: Optional[str] = None, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        """
        Initialize the gateway.

        Args:
            base_url: Root URL of the remote store
            api_key: API key sent as apikey and bearer token
            timeout: Request timeout in seconds, None waits indefinitely
            session: Optional requests.Session (shared connection pool)
        """
        if not base_url:
            raise ValueError("REMOTE_BASE_URL is required")

        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            'Content-Type': 'application/json',
            'Prefer': 'return=representation',
        }
        if api_key:
            self.headers['apikey'] = api_key
            self.headers['Authorization'] = f'Bearer {api_key}'

    @classmethod
    def from_config(cls, config):
        return cls(
            base_url=config['REMOTE_BASE_URL'],
            api_key=config.get('REMOTE_API_KEY'),
            timeout=config.get('REMOTE_TIMEOUT'),
        )

    # =====================================================
    # TRANSPORT
    # =====================================================

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{self.REST_PATH}{path}"
        logger.debug(f"[REMOTE] {method} {path}")

        try:
            response = self.session.request(method, url, headers=self.headers, timeout=self.timeout, **kwargs)
            response.raise_for_status()
        except requests.HTTPError as e:
            body = _response_body(e.response)
            message = body.get('message') if isinstance(body, dict) and body.get('message') else str(e)
            logger.error(f"[REMOTE] {method} {path} failed ({e.response.status_code}): {message}")
            raise RemoteFailure(message, status_code=e.response.status_code, payload={'body': body}) from e
        except requests.RequestException as e:
            logger.error(f"[REMOTE] {method} {path} unreachable: {e}")
            raise RemoteFailure(f'Remote store unreachable: {e}', status_code=503) from e

        if not response.content:
            return None
        return response.json()

    @staticmethod
    def _single(rows) -> Optional[Dict[str, Any]]:
        if isinstance(rows, list):
            return rows[0] if rows else None
        return rows

    def _rpc(self, function: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        result = self._request('POST', f'/rpc/{function}', json={'payload': payload})
        if result is None:
            raise RemoteFailure(f'Remote function {function} returned no result')
        return result

    # =====================================================
    # TABLES
    # =====================================================

    def list(self, table: str, store_id: str) -> List[Dict[str, Any]]:
        rows = self._request('GET', f'/{table}', params={'select': '*', 'storeId': f'eq.{store_id}'})
        return rows or []

    def create(self, table: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self._single(self._request('POST', f'/{table}', json=data))

    def update(self, table: str, data: Dict[str, Any]) -> Dict[str, Any]:
        record_id = data.get('id')
        if not record_id:
            raise ValueError('update requires an id')
        row = self._single(self._request('PATCH', f'/{table}', params={'id': f'eq.{record_id}'}, json=data))
        # PostgREST answers an empty list when the filter matched nothing
        if row is None:
            raise RemoteFailure(f'{table} record {record_id} not found on the remote store', status_code=404)
        return row

    def delete(self, table: str, record_id: str) -> None:
        self._request('DELETE', f'/{table}', params={'id': f'eq.{record_id}'})

    def delete_for_store(self, table: str, store_id: str) -> None:
        self._request('DELETE', f'/{table}', params={'storeId': f'eq.{store_id}'})

    # =====================================================
    # COMPOUND ENDPOINTS
    # =====================================================

    def complete_sale(self, sale: Dict[str, Any]) -> Dict[str, Any]:
        return self._rpc('complete_sale', sale)

    def process_return(self, sale_return: Dict[str, Any]) -> Dict[str, Any]:
        return self._rpc('process_return', sale_return)

    def add_stock(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._rpc('add_stock', payload)

    def add_purchase(self, purchase: Dict[str, Any]) -> Dict[str, Any]:
        return self._rpc('add_purchase', purchase)

    def pay_customer_debt(self, payment_sale: Dict[str, Any]) -> Dict[str, Any]:
        return self._rpc('pay_customer_debt', payment_sale)

    def pay_supplier_debt(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._rpc('pay_supplier_debt', payload)

    def add_product_with_variants(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._rpc('add_product_with_variants', payload)

    def update_product_with_variants(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._rpc('update_product_with_variants', payload)


def _response_body(response):
    """Decode an error body, falling back to raw text."""
    if response is None:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
