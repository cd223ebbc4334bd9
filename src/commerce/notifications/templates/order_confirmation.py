"""Order confirmation, sent after an order is committed."""


class OrderConfirmationTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        total_amount = context.get("total_amount", 0.0)
        currency = context.get("currency", "INR")
        item_count = context.get("item_count", 0)
        return {
            "subject": f"Order #{order_id} placed",
            "body": (
                f"Your order #{order_id} with {item_count} item(s) has been placed.\n\n"
                f"Order Total: {currency} {total_amount:.2f}\n\n"
                "We'll let you know once your payment is confirmed."
            ),
        }
