"""
Tests for SubscriptionsService.

Covers reads, the create/update write shapes and the state-changing
actions.
"""

from datetime import datetime, timezone
from urllib.parse import parse_qs, urlparse

import pytest

from recurly_client import (
    Account,
    NewSubscription,
    NullInt,
    NullTime,
    Subscription,
    SubscriptionAddOn,
    SubscriptionNotes,
    UpdateSubscription,
)

SUBSCRIPTION = """<?xml version="1.0" encoding="UTF-8"?>
<subscription href="https://your-subdomain.recurly.com/v2/subscriptions/44f83d7cba354d5b84812419f923ea96">
  <account href="https://your-subdomain.recurly.com/v2/accounts/1"/>
  <invoice href="https://your-subdomain.recurly.com/v2/invoices/1108"/>
  <plan href="https://your-subdomain.recurly.com/v2/plans/gold">
    <plan_code>gold</plan_code>
    <name>Gold plan</name>
  </plan>
  <uuid>44f83d7cba354d5b84812419f923ea96</uuid>
  <state>active</state>
  <unit_amount_in_cents type="integer">800</unit_amount_in_cents>
  <currency>EUR</currency>
  <quantity type="integer">1</quantity>
  <activated_at type="datetime">2011-05-27T07:00:00Z</activated_at>
  <canceled_at nil="nil"></canceled_at>
  <expires_at nil="nil"></expires_at>
  <current_period_started_at type="datetime">2011-06-27T07:00:00Z</current_period_started_at>
  <current_period_ends_at type="datetime">2010-07-27T07:00:00Z</current_period_ends_at>
  <trial_started_at nil="nil"></trial_started_at>
  <trial_ends_at nil="nil"></trial_ends_at>
  <tax_in_cents type="integer">72</tax_in_cents>
  <tax_type>usst</tax_type>
  <tax_region>CA</tax_region>
  <tax_rate type="float">0.0875</tax_rate>
  <po_number nil="nil"></po_number>
  <net_terms type="integer">0</net_terms>
  <subscription_add_ons type="array">
    <subscription_add_on>
      <add_on_code>ipaddresses</add_on_code>
      <quantity>10</quantity>
      <unit_amount_in_cents>150</unit_amount_in_cents>
    </subscription_add_on>
  </subscription_add_ons>
  <a name="cancel" href="https://your-subdomain.recurly.com/v2/subscriptions/44f83d7cba354d5b84812419f923ea96/cancel" method="put"/>
</subscription>"""

UUID = "44f83d7cba354d5b84812419f923ea96"


def query_of(request):
    return {k: v[0] for k, v in parse_qs(urlparse(request.url).query).items()}


class TestSubscriptionReads:
    """Test subscription reads."""

    def test_get(self, client, respond, sent):
        respond(200, SUBSCRIPTION)
        response, subscription = client.subscriptions.get(UUID)

        assert sent().url.endswith(f"/v2/subscriptions/{UUID}")
        assert subscription.plan.code == "gold"
        assert subscription.plan.name == "Gold plan"
        assert subscription.account_code == "1"
        assert subscription.invoice_number == 1108
        assert subscription.unit_amount_in_cents == 800
        assert subscription.activated_at == NullTime(datetime(2011, 5, 27, 7, 0, 0, tzinfo=timezone.utc))
        assert subscription.canceled_at == NullTime()
        assert subscription.tax_rate == pytest.approx(0.0875)
        assert subscription.net_terms == NullInt(0)
        assert subscription.subscription_add_ons == [
            SubscriptionAddOn(code="ipaddresses", quantity=10, unit_amount_in_cents=150)
        ]

    def test_empty_add_ons(self, client, respond):
        body = SUBSCRIPTION.split("<subscription_add_ons")[0] + "<subscription_add_ons type=\"array\">\n</subscription_add_ons></subscription>"
        respond(200, body)
        _, subscription = client.subscriptions.get(UUID)
        assert subscription.subscription_add_ons == []

    @pytest.mark.parametrize(
        "call,path",
        [
            (lambda s: s.list(), "/v2/subscriptions"),
            (lambda s: s.list_account("1"), "/v2/accounts/1/subscriptions"),
        ],
    )
    def test_lists(self, client, respond, sent, call, path):
        respond(200, "<subscriptions>" + SUBSCRIPTION.split("\n", 1)[1] + "</subscriptions>")
        response, subscriptions = call(client.subscriptions)
        assert sent().url.endswith(path)
        assert subscriptions[0].uuid == UUID

    def test_pager(self, client, respond, sent):
        respond(200, "<subscriptions></subscriptions>")
        assert client.subscriptions.pager().fetch() == []
        assert sent().url.endswith("/v2/subscriptions")


class TestSubscriptionWrites:
    """Test create, preview and update bodies."""

    def test_create(self, client, respond, sent):
        respond(201, SUBSCRIPTION)
        response, subscription = client.subscriptions.create(
            NewSubscription(plan_code="gold", currency="EUR", account=Account(code="1"))
        )
        assert sent().method == "POST"
        assert sent().url.endswith("/v2/subscriptions")
        assert sent().body == (
            b"<subscription><plan_code>gold</plan_code>"
            b"<account><account_code>1</account_code></account>"
            b"<currency>EUR</currency></subscription>"
        )
        assert subscription.uuid == UUID

    def test_create_with_add_ons_and_dates(self, client, respond, sent):
        respond(201, SUBSCRIPTION)
        client.subscriptions.create(
            NewSubscription(
                plan_code="gold",
                currency="USD",
                account=Account(code="1"),
                subscription_add_ons=[SubscriptionAddOn(code="extra_users", unit_amount_in_cents=1000, quantity=2)],
                starts_at=NullTime(datetime(2016, 1, 1, tzinfo=timezone.utc)),
                net_terms=NullInt(0),
                bulk=True,
            )
        )
        body = sent().body
        assert (
            b"<subscription_add_ons><subscription_add_on><add_on_code>extra_users</add_on_code>"
            b"<unit_amount_in_cents>1000</unit_amount_in_cents><quantity>2</quantity>"
            b"</subscription_add_on></subscription_add_ons>"
        ) in body
        assert b"<starts_at>2016-01-01T00:00:00Z</starts_at>" in body
        assert b"<net_terms>0</net_terms>" in body
        assert b"<bulk>true</bulk>" in body

    def test_preview(self, client, respond, sent):
        respond(200, SUBSCRIPTION)
        client.subscriptions.preview(NewSubscription(plan_code="gold", currency="USD", account=Account(code="1")))
        assert sent().method == "POST"
        assert sent().url.endswith("/v2/subscriptions/preview")

    def test_update(self, client, respond, sent):
        respond(200, SUBSCRIPTION)
        client.subscriptions.update(UUID, UpdateSubscription(timeframe="now", quantity=2))
        assert sent().method == "PUT"
        assert sent().url.endswith(f"/v2/subscriptions/{UUID}")
        assert sent().body == b"<subscription><timeframe>now</timeframe><quantity>2</quantity></subscription>"

    def test_make_update_keeps_add_ons(self, client, respond, sent):
        respond(200, SUBSCRIPTION)
        _, subscription = client.subscriptions.get(UUID)
        update = subscription.make_update()
        update.timeframe = "renewal"
        client.subscriptions.update(UUID, update)
        assert sent().body == (
            b"<subscription><timeframe>renewal</timeframe><net_terms>0</net_terms>"
            b"<subscription_add_ons><subscription_add_on><add_on_code>ipaddresses</add_on_code>"
            b"<unit_amount_in_cents>150</unit_amount_in_cents><quantity>10</quantity>"
            b"</subscription_add_on></subscription_add_ons></subscription>"
        )

    def test_update_notes(self, client, respond, sent):
        respond(200, SUBSCRIPTION)
        client.subscriptions.update_notes(UUID, SubscriptionNotes(customer_notes="Thanks!"))
        assert sent().method == "PUT"
        assert sent().url.endswith(f"/v2/subscriptions/{UUID}/notes")
        assert sent().body == b"<subscription><customer_notes>Thanks!</customer_notes></subscription>"

    def test_preview_change(self, client, respond, sent):
        respond(200, SUBSCRIPTION)
        client.subscriptions.preview_change(UUID, UpdateSubscription(plan_code="silver"))
        assert sent().method == "POST"
        assert sent().url.endswith(f"/v2/subscriptions/{UUID}/preview")


class TestSubscriptionActions:
    """Test cancel, reactivate, terminate and postpone."""

    @pytest.mark.parametrize("action", ["cancel", "reactivate"])
    def test_simple_actions(self, client, respond, sent, action):
        respond(200, SUBSCRIPTION)
        response, subscription = getattr(client.subscriptions, action)(UUID)
        assert sent().method == "PUT"
        assert sent().url.endswith(f"/v2/subscriptions/{UUID}/{action}")
        assert sent().body is None
        assert subscription.uuid == UUID

    @pytest.mark.parametrize(
        "operation,refund_type",
        [
            ("terminate_with_partial_refund", "partial"),
            ("terminate_with_full_refund", "full"),
            ("terminate_without_refund", "none"),
        ],
    )
    def test_terminate(self, client, respond, sent, operation, refund_type):
        respond(200, SUBSCRIPTION)
        getattr(client.subscriptions, operation)(UUID)
        assert sent().method == "PUT"
        assert urlparse(sent().url).path == f"/v2/subscriptions/{UUID}/terminate"
        assert query_of(sent()) == {"refund_type": refund_type}

    def test_postpone(self, client, respond, sent):
        respond(200, SUBSCRIPTION)
        client.subscriptions.postpone(UUID, datetime(2015, 8, 27, 7, 0, 0, tzinfo=timezone.utc), bulk=True)
        assert urlparse(sent().url).path == f"/v2/subscriptions/{UUID}/postpone"
        assert query_of(sent()) == {"next_renewal_date": "2015-08-27T07:00:00Z", "bulk": "true"}

    def test_postpone_defaults_bulk_false(self, client, respond, sent):
        respond(200, SUBSCRIPTION)
        client.subscriptions.postpone(UUID, datetime(2015, 8, 27, tzinfo=timezone.utc))
        assert query_of(sent())["bulk"] == "false"

    def test_validation_failure(self, client, respond):
        respond(
            422,
            '<errors><error field="subscription.account.account_code" symbol="blank">can\'t be blank</error></errors>',
        )
        response, subscription = client.subscriptions.create(NewSubscription(plan_code="gold", currency="USD"))
        assert subscription is None
        assert response.errors[0].symbol == "blank"
        assert isinstance(response.errors[0].message, str)
