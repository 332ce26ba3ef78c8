"""Order fulfillment through the ShipStation proxy API.

Given a validated order number and tracking number, finds the order
awaiting shipment, marks it shipped with the tracking number, and
optionally assigns it to a user.
"""

from dataclasses import dataclass
from typing import Any

import httpx

from src.utils.config import FulfillmentConfig
from src.utils.errors import FulfillmentError
from src.utils.logger import get_logger

logger = get_logger(__name__)

_UNEXPECTED_LOOKUP = "Unexpected response from order lookup"


@dataclass
class FulfillmentResult:
    """Outcome of a successful fulfillment update."""

    order_id: int | str
    order_number: str
    tracking_number: str
    assigned: bool = False


class FulfillmentClient:
    """Client for the fulfillment endpoints of the ShipStation proxy.

    Args:
        config: Fulfillment API configuration.
        client: Preconfigured ``httpx.Client``. One is built from
            ``config`` when omitted.
    """

    def __init__(
        self,
        config: FulfillmentConfig | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.config = config or FulfillmentConfig()
        self._client = client or httpx.Client(
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            headers={"Content-Type": "application/json"},
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "FulfillmentClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _request(self, method: str, url: str, action: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise FulfillmentError(
                f"Failed to {action}", {"reason": str(exc)}
            ) from exc
        if not response.is_success:
            raise FulfillmentError(
                f"Failed to {action}: {response.status_code}",
                {"status_code": response.status_code},
            )
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise FulfillmentError(
                _UNEXPECTED_LOOKUP, {"reason": str(exc)}
            ) from exc

    def find_unfulfilled_order(self, order_number: str) -> dict[str, Any]:
        """Return the first order awaiting shipment for ``order_number``.

        Raises:
            FulfillmentError: If the lookup fails or returns a malformed
                body, the order does not exist, or every matching order
                is already fulfilled.
        """
        response = self._request(
            "GET", "/orders", "look up order", params={"orderNumber": order_number}
        )
        body = self._json(response)
        if not isinstance(body, dict):
            raise FulfillmentError(
                _UNEXPECTED_LOOKUP, {"body_type": type(body).__name__}
            )
        orders = body.get("orders") or []
        if not isinstance(orders, list):
            raise FulfillmentError(
                _UNEXPECTED_LOOKUP, {"orders_type": type(orders).__name__}
            )
        if not orders:
            raise FulfillmentError("Order not found", {"order_number": order_number})

        for order in orders:
            if not isinstance(order, dict):
                raise FulfillmentError(
                    _UNEXPECTED_LOOKUP, {"order_type": type(order).__name__}
                )
            if order.get("orderStatus") == self.config.awaiting_status:
                if "orderId" not in order:
                    raise FulfillmentError(
                        _UNEXPECTED_LOOKUP, {"reason": "order has no orderId"}
                    )
                logger.info("Found unfulfilled order: %s", order["orderId"])
                return order

        raise FulfillmentError(
            "No unfulfilled order found", {"order_number": order_number}
        )

    def mark_as_shipped(self, order_id: int | str, tracking_number: str) -> None:
        self._request(
            "POST",
            "/orders/markasshipped",
            "mark as shipped",
            json={
                "orderId": order_id,
                "carrierCode": self.config.carrier_code,
                "trackingNumber": tracking_number,
                "notifyCustomer": self.config.notify_customer,
                "notifySalesChannel": self.config.notify_sales_channel,
            },
        )
        logger.info("Marked order %s as shipped", order_id)

    def assign_user(self, order_id: int | str, user_id: str) -> None:
        self._request(
            "POST",
            "/orders/assignuser",
            "assign user",
            json={"orderIds": [order_id], "userId": user_id},
        )
        logger.info("Assigned user to order %s", order_id)

    def fulfill(self, order_number: str, tracking_number: str) -> FulfillmentResult:
        """Mark the order awaiting shipment as shipped with ``tracking_number``.

        Args:
            order_number: Canonical order number from the label.
            tracking_number: Canonical tracking number from the label.

        Returns:
            The fulfilled order's id and whether a user was assigned.

        Raises:
            FulfillmentError: If any step of the update fails.
        """
        order = self.find_unfulfilled_order(order_number)
        order_id = order["orderId"]
        self.mark_as_shipped(order_id, tracking_number)

        assigned = False
        if self.config.assign_user_id:
            self.assign_user(order_id, self.config.assign_user_id)
            assigned = True

        return FulfillmentResult(
            order_id=order_id,
            order_number=order_number,
            tracking_number=tracking_number,
            assigned=assigned,
        )
