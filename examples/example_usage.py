"""Example: using the service layer directly (no Flask).

Controllers are a thin layer; the rules live in the services and the
lifecycle module.
"""

from onduty.container import build_container
from onduty.main import load_settings


def main():
    container = build_container(settings=load_settings({"STORE_BACKEND": "memory"}))
    identity = container.identity_service
    duty = container.request_service

    alice = identity.register(name="Alice", email="alice@example.com", password="secret1")
    bob = identity.register(name="Bob", email="bob@example.com", password="secret1", role="manager")

    req = duty.submit(actor=alice, duty_date="2024-05-01", shift="night", reason="coverage")
    print(duty.available_actions(actor=bob, request_id=req.request_id))
    print(duty.accept(actor=bob, request_id=req.request_id))


if __name__ == "__main__":
    main()
