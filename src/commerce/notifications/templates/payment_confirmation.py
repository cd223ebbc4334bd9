"""Payment confirmation, sent when the gateway confirms a payment."""


class PaymentConfirmationTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        total_amount = context.get("total_amount", 0.0)
        currency = context.get("currency", "INR")
        return {
            "subject": "Payment Confirmation",
            "body": (
                f"Your payment for order #{order_id} has been successfully processed.\n\n"
                f"Total Amount: {currency} {total_amount:.2f}\n\n"
                "Your order will be shipped soon."
            ),
            "html_body": (
                "<html><body>"
                "<h1>Payment Confirmation</h1>"
                f"<p>Your payment for order {order_id} has been successfully processed.</p>"
                f"<p>Total Amount: {currency} {total_amount:.2f}</p>"
                "<p>Your order will be shipped soon.</p>"
                "</body></html>"
            ),
        }
