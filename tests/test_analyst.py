"""Tests for the AI financial analyst, with a fake Gemini model."""

import asyncio
import json
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from nexusledger.agents import (
    EMPTY_RESPONSE_MESSAGE,
    ERROR_MESSAGE,
    NO_API_KEY_MESSAGE,
    FinancialAnalystAgent,
    build_analysis_context,
    build_prompt,
)
from nexusledger.config import GeminiSettings
from nexusledger.models.ledger import (
    ERPData,
    LedgerEntry,
    Product,
    Transaction,
    TransactionType,
    UserProfile,
)


NOW = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeModel:
    """Plays back a script of responses and exceptions."""

    def __init__(self, *outcomes):
        self._outcomes = list(outcomes)
        self.prompts = []

    async def generate_content_async(self, prompt):
        self.prompts.append(prompt)
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return FakeResponse(outcome)


def make_agent(model=None, api_key=None, max_attempts=3) -> FinancialAnalystAgent:
    return FinancialAnalystAgent(
        api_key=api_key,
        settings=GeminiSettings(api_key=None, max_attempts=max_attempts),
        model=model,
        retry_wait=0,
    )


def make_books(transactions=0, entries=0, profile=None) -> ERPData:
    return ERPData(
        user_profile=profile,
        products=[
            Product(id="p1", name="Widget", sku="W", quantity=Decimal("4"), average_cost=Decimal("2.50")),
            Product(id="p2", name="Gadget", sku="G", quantity=Decimal("1"), average_cost=Decimal("10")),
        ],
        transactions=[
            Transaction(
                id=f"t{i}",
                type=TransactionType.SALE,
                date=NOW,
                product_id="p1",
                product_name="Widget",
                quantity=Decimal("1"),
                unit_price=Decimal("5"),
                total_amount=Decimal("5"),
                party="Bob",
            )
            for i in range(transactions)
        ],
        ledger=[
            LedgerEntry(
                id=f"e{i}",
                transaction_id=f"t{i // 2}",
                date=NOW,
                account="Cash / Bank",
                debit=Decimal("5"),
            )
            for i in range(entries)
        ],
    )


class TestAnalysisContext:
    """Tests for what the model is shown."""

    def test_defaults_for_missing_profile(self):
        """Unnamed businesses get placeholder names."""
        context = build_analysis_context(make_books())
        assert context.business_name == "The Company"
        assert context.location == "Unknown"

    def test_profile_values(self):
        """The profile's business name and location are used."""
        profile = UserProfile(name="Ana", business_name="Ana's Shop", location="Porto")
        context = build_analysis_context(make_books(profile=profile))
        assert context.business_name == "Ana's Shop"
        assert context.location == "Porto"

    def test_stock_valuation_and_products(self):
        """Products are summarised by name, quantity and cost."""
        context = build_analysis_context(make_books())

        assert context.stock_valuation == Decimal("20.00")
        assert [(p.name, p.qty, p.cost) for p in context.products] == [
            ("Widget", Decimal("4"), Decimal("2.50")),
            ("Gadget", Decimal("1"), Decimal("10")),
        ]

    def test_only_recent_activity(self):
        """The last 15 transactions and 20 ledger entries are included."""
        context = build_analysis_context(make_books(transactions=40, entries=50))

        assert [t.id for t in context.recent_transactions] == [f"t{i}" for i in range(25, 40)]
        assert [e.id for e in context.ledger_summary] == [f"e{i}" for i in range(30, 50)]

    def test_prompt_json_uses_camel_case(self):
        """The context is serialised with the snapshot's key style."""
        document = json.loads(build_analysis_context(make_books(transactions=1)).to_prompt_json())

        assert set(document) == {
            "businessName", "location", "stockValuation",
            "products", "recentTransactions", "ledgerSummary",
        }
        assert document["recentTransactions"][0]["totalAmount"] == "5"

    def test_prompt_contents(self):
        """The prompt carries the business, the question and the sections."""
        profile = UserProfile(business_name="Ana's Shop", location="Porto")
        prompt = build_prompt(build_analysis_context(make_books(profile=profile)), "How is cash?")

        assert "CFO" in prompt
        assert "Ana's Shop located in Porto" in prompt
        assert 'USER QUERY: "How is cash?"' in prompt
        for section in ("Executive Summary", "Key Insights", "Financial Recommendation"):
            assert section in prompt


class TestFinancialAnalystAgent:
    """Tests for calling the model and handling failures."""

    def test_no_api_key(self):
        """Without a key the model is never called."""
        agent = make_agent()

        response = asyncio.run(agent.analyze(make_books(), "How are we doing?"))

        assert not agent.is_configured
        assert response.text == NO_API_KEY_MESSAGE
        assert not response.success

    def test_blank_api_key_is_not_configured(self):
        """Whitespace is not a key."""
        assert not make_agent(api_key="   ").is_configured
        assert make_agent(api_key="abc").is_configured

    def test_success(self):
        """The model's text is returned, trimmed."""
        model = FakeModel("  **Executive Summary**: all good  ")
        agent = make_agent(model)

        response = asyncio.run(agent.analyze(make_books(), "How are we doing?"))

        assert response.success
        assert response.text == "**Executive Summary**: all good"
        assert 'USER QUERY: "How are we doing?"' in model.prompts[0]

    def test_retries_then_succeeds(self):
        """Transient failures are retried."""
        model = FakeModel(ConnectionError("reset"), "Recovered")
        agent = make_agent(model, max_attempts=3)

        response = asyncio.run(agent.analyze(make_books(), "Cash?"))

        assert response.success
        assert response.text == "Recovered"
        assert len(model.prompts) == 2

    def test_gives_up_with_error_message(self):
        """Persistent failures become the fixed error message."""
        model = FakeModel(RuntimeError("bad key"), RuntimeError("bad key"), "never reached")
        agent = make_agent(model, max_attempts=2)

        response = asyncio.run(agent.analyze(make_books(), "Cash?"))

        assert not response.success
        assert response.text == ERROR_MESSAGE
        assert len(model.prompts) == 2

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_response(self, text):
        """An empty answer is replaced by a fixed message."""
        agent = make_agent(FakeModel(text))

        response = asyncio.run(agent.analyze(make_books(), "Cash?"))

        assert not response.success
        assert response.text == EMPTY_RESPONSE_MESSAGE

    def test_books_are_not_mutated(self):
        """Analysis is read-only."""
        books = make_books(transactions=3, entries=6)
        before = books.model_copy(deep=True)
        agent = make_agent(FakeModel("Fine"))

        asyncio.run(agent.analyze(books, "Cash?"))

        assert books == before


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
