"""
Simple merchant usage example (server-side). Set ITRANSACT_API_KEY and
ITRANSACT_API_SECRET in the environment, then run an authorize followed by a
capture against the iTransact test endpoint.
"""
from itransact_connector import ItransactConnector, CreditCard, PaymentOptions, BillingAddress

def run():
    connector = ItransactConnector(test_mode=True)
    card = CreditCard(number="4000100011112224", verification_value="123", month=9, year=2030)
    options = PaymentOptions(
        email="name@domain.com",
        order_id="1",
        description="Store Purchase",
        billing_address=BillingAddress(address1="456 My Street", city="Ottawa", state="ON", zip="K1C2N6"),
    )
    auth = connector.authorize(1060, card, options)
    print("Authorize:", auth.model_dump_json())
    if auth.success:
        capture = connector.capture(1060, auth.authorization)
        print("Capture:", capture.model_dump_json())

if __name__ == "__main__":
    run()
