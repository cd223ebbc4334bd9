"""Payment failure notice. The order has been cancelled."""


class PaymentFailureTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        return {
            "subject": f"Payment for order #{order_id} failed",
            "body": (
                f"We could not verify the payment for order #{order_id}, so the order has been cancelled.\n\n"
                "No money has been taken. You can place the order again at any time."
            ),
        }
