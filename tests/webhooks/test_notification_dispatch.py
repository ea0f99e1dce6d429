"""
Tests for webhook parsing.

Every notification name in the dispatch tables must decode into its
family's shape; unknown names fail without decoding.
"""

import hashlib
import io
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from recurly_client import NullBool, NullInt, NullTime, UnknownNotificationError, UnmarshalError
from recurly_client.webhooks import (
    LEGACY_NOTIFICATIONS,
    NOTIFICATIONS,
    AccountNotification,
    ChargeInvoiceNotification,
    CreditInvoiceNotification,
    CreditPaymentNotification,
    InvoiceNotification,
    LegacyDunningEventNotification,
    NewDunningEventNotification,
    PaymentNotification,
    SubscriptionNotification,
    parse,
    parse_legacy,
)

ACCOUNT = """
  <account>
    <account_code>1</account_code>
    <username>verena</username>
    <email>verena@example.com</email>
    <first_name>Verena</first_name>
    <last_name>Example</last_name>
    <company_name>Company, Inc.</company_name>
  </account>"""

SUCCESSFUL_PAYMENT = f"""<?xml version="1.0" encoding="UTF-8"?>
<successful_payment_notification>{ACCOUNT}
  <transaction>
    <id>a5143c1d3a6f4a8287d0e2cc1d4c0427</id>
    <invoice_id>8fjk3sd7j90s0789k0982k0a3b1c0d2e</invoice_id>
    <invoice_number type="integer">2059</invoice_number>
    <subscription_id>1974a098jd0s9f8g7h6j5k4l3m2n1o0p</subscription_id>
    <action>purchase</action>
    <date type="datetime">2009-11-22T13:10:38Z</date>
    <amount_in_cents type="integer">1000</amount_in_cents>
    <status>success</status>
    <message>Bogus Gateway: Forced success</message>
    <reference>reference</reference>
    <source>subscription</source>
    <cvv_result code=""></cvv_result>
    <avs_result code=""></avs_result>
    <avs_result_street></avs_result_street>
    <avs_result_postal></avs_result_postal>
    <test type="boolean">true</test>
    <voidable type="boolean">true</voidable>
    <refundable type="boolean">true</refundable>
  </transaction>
</successful_payment_notification>"""

EXPIRED_SUBSCRIPTION = f"""<?xml version="1.0" encoding="UTF-8"?>
<expired_subscription_notification>{ACCOUNT}
  <subscription>
    <plan>
      <plan_code>1dpt</plan_code>
      <name>Subscription One</name>
    </plan>
    <uuid>d1b6d359a01ded71caed78eaa0fedf8e</uuid>
    <state>expired</state>
    <quantity type="integer">1</quantity>
    <total_amount_in_cents type="integer">200</total_amount_in_cents>
    <activated_at type="datetime">2010-09-23T22:05:03Z</activated_at>
    <canceled_at type="datetime">2010-09-23T22:05:43Z</canceled_at>
    <expires_at type="datetime">2010-09-24T22:05:03Z</expires_at>
    <current_period_started_at type="datetime">2010-09-23T22:05:03Z</current_period_started_at>
    <current_period_ends_at type="datetime">2010-09-24T22:05:03Z</current_period_ends_at>
    <trial_started_at nil="true" type="datetime"></trial_started_at>
    <trial_ends_at nil="true" type="datetime"></trial_ends_at>
    <subscription_add_ons type="array"/>
  </subscription>
</expired_subscription_notification>"""

NEW_SUBSCRIPTION = f"""<?xml version="1.0" encoding="UTF-8"?>
<new_subscription_notification>{ACCOUNT}
  <subscription>
    <plan>
      <plan_code>1dpt</plan_code>
      <name>Subscription One</name>
    </plan>
    <uuid>d1b6d359a01ded71caed78eaa0fedf8e</uuid>
    <state>active</state>
    <quantity type="integer">1</quantity>
    <total_amount_in_cents type="integer">200</total_amount_in_cents>
    <activated_at type="datetime">2010-09-23T22:05:03Z</activated_at>
    <net_terms type="integer">0</net_terms>
    <subscription_add_ons type="array">
      <subscription_add_on>
        <add_on_code>extra_users</add_on_code>
        <quantity type="integer">2</quantity>
        <unit_amount_in_cents type="integer">1000</unit_amount_in_cents>
      </subscription_add_on>
    </subscription_add_ons>
  </subscription>
</new_subscription_notification>"""

NEW_CHARGE_INVOICE = f"""<?xml version="1.0" encoding="UTF-8"?>
<new_charge_invoice_notification>{ACCOUNT}
  <invoice>
    <uuid>42feb03ce368c0e1ead35d4bfa89b82e</uuid>
    <state>pending</state>
    <origin>renewal</origin>
    <subscription_ids type="array">
      <subscription_id>40b8f5e99df03b8684b99d4993b6e089</subscription_id>
    </subscription_ids>
    <invoice_number_prefix></invoice_number_prefix>
    <invoice_number type="integer">1000</invoice_number>
    <balance_in_cents type="integer">100</balance_in_cents>
    <total_in_cents type="integer">100</total_in_cents>
    <currency>USD</currency>
    <created_at type="datetime">2014-01-01T20:21:44Z</created_at>
    <closed_at nil="true"></closed_at>
    <net_terms type="integer">30</net_terms>
    <collection_method>manual</collection_method>
  </invoice>
</new_charge_invoice_notification>"""

NEW_INVOICE_LEGACY = f"""<?xml version="1.0" encoding="UTF-8"?>
<new_invoice_notification>{ACCOUNT}
  <invoice>
    <uuid>ffc64d71d4b5404e93f13aac9c63b007</uuid>
    <subscription_id>d1b6d359a01ded71caed78eaa0fedf8e</subscription_id>
    <state>open</state>
    <invoice_number_prefix></invoice_number_prefix>
    <invoice_number type="integer">1000</invoice_number>
    <po_number></po_number>
    <vat_number></vat_number>
    <total_in_cents type="integer">1000</total_in_cents>
    <currency>USD</currency>
    <date type="datetime">2014-01-01T20:21:44Z</date>
    <closed_at type="datetime" nil="true"></closed_at>
    <net_terms type="integer">0</net_terms>
    <collection_method>automatic</collection_method>
  </invoice>
</new_invoice_notification>"""

NEW_CREDIT_PAYMENT = f"""<?xml version="1.0" encoding="UTF-8"?>
<new_credit_payment_notification>{ACCOUNT}
  <credit_payment>
    <uuid>4110792b3b01967d854f674b7282f542</uuid>
    <action>payment</action>
    <amount_in_cents type="integer">3579</amount_in_cents>
    <original_invoice_number type="integer">1016</original_invoice_number>
    <applied_to_invoice_number type="integer">1017</applied_to_invoice_number>
    <original_credit_payment_uuid nil="true"></original_credit_payment_uuid>
    <refund_transaction_uuid nil="true"></refund_transaction_uuid>
    <created_at type="datetime">2018-02-13T16:56:39Z</created_at>
    <voided_at nil="true"></voided_at>
  </credit_payment>
</new_credit_payment_notification>"""


def minimal(name):
    return f"<{name}>{ACCOUNT}</{name}>".encode()


class TestDispatchTables:
    """Test that every known name decodes into its family."""

    @pytest.mark.parametrize("name", sorted(NOTIFICATIONS))
    def test_every_name(self, name):
        notification = parse(minimal(name))
        assert isinstance(notification, NOTIFICATIONS[name])
        assert notification.type == name
        assert notification.account.code == "1"

    @pytest.mark.parametrize("name", sorted(LEGACY_NOTIFICATIONS))
    def test_every_legacy_name(self, name):
        notification = parse_legacy(minimal(name))
        assert isinstance(notification, LEGACY_NOTIFICATIONS[name])
        assert notification.type == name

    @pytest.mark.parametrize(
        "name,cls",
        [
            ("new_account_notification", AccountNotification),
            ("billing_info_updated_notification", AccountNotification),
            ("reactivated_account_notification", SubscriptionNotification),
            ("prerenewal_notification", SubscriptionNotification),
            ("new_shipping_address_notification", SubscriptionNotification),
            ("past_due_invoice_notification", ChargeInvoiceNotification),
            ("open_credit_invoice_notification", CreditInvoiceNotification),
            ("voided_credit_payment_notification", CreditPaymentNotification),
            ("void_payment_notification", PaymentNotification),
            ("successful_refund_notification", PaymentNotification),
            ("new_dunning_event_notification", NewDunningEventNotification),
        ],
    )
    def test_families(self, name, cls):
        assert NOTIFICATIONS[name] is cls

    def test_legacy_table_differences(self):
        assert LEGACY_NOTIFICATIONS["new_invoice_notification"] is InvoiceNotification
        assert LEGACY_NOTIFICATIONS["past_due_invoice_notification"] is InvoiceNotification
        assert LEGACY_NOTIFICATIONS["new_dunning_event_notification"] is LegacyDunningEventNotification
        assert "new_invoice_notification" not in NOTIFICATIONS

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            NOTIFICATIONS["custom_notification"] = AccountNotification


class TestParse:
    """Test decoding of full payloads."""

    def test_successful_payment(self):
        notification = parse(SUCCESSFUL_PAYMENT)
        assert isinstance(notification, PaymentNotification)
        assert notification.account.username == "verena"
        assert notification.account.company_name == "Company, Inc."

        transaction = notification.transaction
        assert transaction.uuid == "a5143c1d3a6f4a8287d0e2cc1d4c0427"
        assert transaction.invoice_number == 2059
        assert transaction.subscription_uuid == "1974a098jd0s9f8g7h6j5k4l3m2n1o0p"
        assert transaction.amount_in_cents == 1000
        assert transaction.status == "success"
        assert transaction.test == NullBool(True)
        assert transaction.voidable == NullBool(True)

    def test_expired_subscription(self):
        notification = parse(EXPIRED_SUBSCRIPTION.encode())
        assert isinstance(notification, SubscriptionNotification)
        subscription = notification.subscription
        assert subscription.plan.code == "1dpt"
        assert subscription.state == "expired"
        assert subscription.expires_at == NullTime(datetime(2010, 9, 24, 22, 5, 3, tzinfo=timezone.utc))
        assert subscription.trial_ends_at == NullTime()
        assert subscription.subscription_add_ons == []

    def test_charge_invoice(self):
        notification = parse(NEW_CHARGE_INVOICE)
        invoice = notification.invoice
        assert invoice.subscription_uuids == ["40b8f5e99df03b8684b99d4993b6e089"]
        assert invoice.origin == "renewal"
        assert invoice.net_terms == NullInt(30)
        assert invoice.closed_at == NullTime()

    def test_legacy_invoice(self):
        notification = parse_legacy(NEW_INVOICE_LEGACY)
        assert isinstance(notification, InvoiceNotification)
        assert notification.invoice.subscription_uuid == "d1b6d359a01ded71caed78eaa0fedf8e"
        assert notification.invoice.created_at.value == datetime(2014, 1, 1, 20, 21, 44, tzinfo=timezone.utc)

    def test_credit_payment(self):
        notification = parse(NEW_CREDIT_PAYMENT)
        payment = notification.credit_payment
        assert payment.original_invoice_number == 1016
        assert payment.applied_to_invoice_number == 1017
        assert payment.voided_at == NullTime()

    def test_stream_input(self):
        notification = parse(io.BytesIO(SUCCESSFUL_PAYMENT.encode()))
        assert notification.type == "successful_payment_notification"

    def test_id_is_payload_digest(self):
        payload = SUCCESSFUL_PAYMENT.encode()
        assert parse(payload).id == hashlib.md5(payload).hexdigest()
        assert parse(payload).id == parse(payload).id

    def test_notifications_are_immutable(self):
        notification = parse(SUCCESSFUL_PAYMENT)
        with pytest.raises(ValidationError):
            notification.type = "other"

    @pytest.mark.parametrize(
        "mutate",
        [
            lambda s: setattr(s, "state", "active"),
            lambda s: setattr(s.plan, "code", "gold"),
            lambda s: setattr(s.subscription_add_ons[0], "quantity", 5),
        ],
    )
    def test_subscription_snapshot_is_immutable(self, mutate):
        notification = parse(NEW_SUBSCRIPTION)
        with pytest.raises(ValidationError):
            mutate(notification.subscription)
        assert notification.subscription.state == "active"
        assert notification.subscription.plan.code == "1dpt"
        assert notification.subscription.subscription_add_ons[0].quantity == 2

    def test_subscription_snapshot_feeds_an_update(self):
        update = parse(NEW_SUBSCRIPTION).subscription.make_update()
        update.timeframe = "now"
        assert update.subscription_add_ons[0].code == "extra_users"
        assert update.net_terms == NullInt(0)

    def test_shipping_address(self):
        notification = parse(NEW_SUBSCRIPTION.replace("new_subscription_notification", "new_shipping_address_notification"))
        assert isinstance(notification, SubscriptionNotification)
        assert notification.subscription.uuid == "d1b6d359a01ded71caed78eaa0fedf8e"


class TestParseErrors:
    """Test failure modes."""

    def test_unknown_notification(self):
        with pytest.raises(UnknownNotificationError) as exc_info:
            parse(b'<?xml version="1.0" encoding="UTF-8"?><unknown_notification></unknown_notification>')
        assert exc_info.value.name == "unknown_notification"
        assert exc_info.value.message == "unknown notification: unknown_notification"

    def test_unknown_is_not_decoded(self):
        """The name is rejected before the (malformed) body is read."""
        with pytest.raises(UnknownNotificationError):
            parse(b"<mystery_notification><account><account_code>")

    def test_legacy_name_unknown_to_current_table(self):
        with pytest.raises(UnknownNotificationError):
            parse(minimal("new_invoice_notification"))

    @pytest.mark.parametrize("payload", [b"", b"not xml"])
    def test_malformed(self, payload):
        with pytest.raises(UnmarshalError):
            parse(payload)

    def test_malformed_known_payload(self):
        with pytest.raises(UnmarshalError):
            parse(b"<new_account_notification><account><account_code>")
