"""
AI Financial Analyst

DESIGN DECISION: The analyst is a read-only collaborator.

CRITICAL BOUNDARIES:
   - CAN: Read a compact projection of the books handed to it
   - CAN: Return formatted prose (Markdown) for display
   - CANNOT: Read or write the live state
   - CANNOT: Raise into the caller; every failure becomes a message

The response is never parsed. It is shown to the user as-is, and the
books stay exactly as they were whatever the model says.
"""

import json
from decimal import Decimal
from typing import Any, Optional

import google.generativeai as genai
import structlog
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential

from nexusledger.config import GeminiSettings, get_settings
from nexusledger.models.ledger import ERPData, LedgerEntry, Transaction
from nexusledger.reports import total_stock_value


logger = structlog.get_logger(__name__)

SYSTEM_INSTRUCTION = "You are a highly capable financial analyst AI."

NO_API_KEY_MESSAGE = "Please enter your Gemini API Key in Settings to use the AI Analyst."
ERROR_MESSAGE = (
    "An error occurred while communicating with the AI Analyst. Please check your API Key."
)
EMPTY_RESPONSE_MESSAGE = "I couldn't generate an analysis at this time."

DEFAULT_BUSINESS_NAME = "The Company"
DEFAULT_LOCATION = "Unknown"

RECENT_TRANSACTIONS = 15
RECENT_LEDGER_ENTRIES = 20


class ContextProduct(BaseModel):
    name: str
    qty: Decimal
    cost: Decimal


class AnalysisContext(BaseModel):
    """
    What the model is allowed to see.

    Serialized with camelCase keys (businessName, stockValuation, ...).
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    business_name: str
    location: str
    stock_valuation: Decimal
    products: list[ContextProduct] = Field(default_factory=list)
    recent_transactions: list[Transaction] = Field(default_factory=list)
    ledger_summary: list[LedgerEntry] = Field(default_factory=list)

    def to_prompt_json(self) -> str:
        return json.dumps(self.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False)


class AnalysisResponse(BaseModel):
    """Display-only answer from the analyst."""

    text: str
    success: bool


def build_analysis_context(data: ERPData) -> AnalysisContext:
    """
    Project the books down to what fits in a prompt.

    Only the most recent transactions and ledger entries are included.
    """
    profile = data.user_profile
    business_name = (profile.business_name if profile else "") or DEFAULT_BUSINESS_NAME
    location = (profile.location if profile else "") or DEFAULT_LOCATION

    return AnalysisContext(
        business_name=business_name,
        location=location,
        stock_valuation=total_stock_value(data.products),
        products=[
            ContextProduct(name=p.name, qty=p.quantity, cost=p.average_cost)
            for p in data.products
        ],
        recent_transactions=data.transactions[-RECENT_TRANSACTIONS:],
        ledger_summary=data.ledger[-RECENT_LEDGER_ENTRIES:],
    )


def build_prompt(context: AnalysisContext, query: str) -> str:
    """CFO-style prompt with the three fixed response sections."""
    return f"""You are the Chief Financial Officer (CFO) AI for {context.business_name} located in {context.location}.

CONTEXT DATA:
{context.to_prompt_json()}

USER QUERY: "{query}"

INSTRUCTIONS:
1. Analyze the data strictly based on the numbers provided.
2. Format your response using clear Markdown.
3. Structure your response into these sections:
   - **Executive Summary**: A direct answer to the query.
   - **Key Insights**: Bullet points of trends or anomalies found in the data.
   - **Financial Recommendation**: Actionable advice based on the analysis.

Keep the tone professional, concise, and helpful."""


class FinancialAnalystAgent:
    """
    Answers free-text questions about the books using Gemini.

    RESPONSIBILITIES:
    - Build the context projection and the prompt
    - Call the model, retrying transient failures
    - Turn every failure into a fixed user-facing message

    BOUNDARIES:
    - NEVER mutates the books it is given
    - NEVER raises to the caller
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        settings: Optional[GeminiSettings] = None,
        model: Optional[Any] = None,
        retry_wait: float = 1.0,
    ):
        """
        Args:
            api_key: Overrides the configured key (e.g. typed in Settings)
            settings: Gemini settings, loaded from the environment if omitted
            model: Pre-built model object exposing `generate_content_async`
            retry_wait: Base of the exponential backoff between attempts
        """
        self._settings = settings or get_settings().gemini
        self._api_key = (api_key or self._settings.api_key or "").strip()
        self._model = model
        self._retry_wait = retry_wait

    @property
    def is_configured(self) -> bool:
        return self._model is not None or bool(self._api_key)

    def _get_model(self):
        """Configure Google Generative AI lazily, on first use."""
        if self._model is None:
            genai.configure(api_key=self._api_key)
            self._model = genai.GenerativeModel(
                model_name=self._settings.model_name,
                system_instruction=SYSTEM_INSTRUCTION,
                generation_config={
                    "temperature": self._settings.temperature,
                    "max_output_tokens": self._settings.max_tokens,
                },
            )
        return self._model

    async def _generate(self, prompt: str) -> str:
        model = self._get_model()
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._settings.max_attempts),
            wait=wait_exponential(multiplier=self._retry_wait, max=10),
            reraise=True,
        ):
            with attempt:
                response = await model.generate_content_async(prompt)
        return (response.text or "").strip()

    async def analyze(self, data: ERPData, query: str) -> AnalysisResponse:
        """
        Answer a question about the books.

        Returns:
            AnalysisResponse whose text is always displayable; `success`
            is False for the fixed no-key, empty and error messages
        """
        if not self.is_configured:
            return AnalysisResponse(text=NO_API_KEY_MESSAGE, success=False)

        prompt = build_prompt(build_analysis_context(data), query)

        try:
            text = await self._generate(prompt)
        except Exception as e:
            # Auth, quota, network and safety-block errors all end up here
            logger.error("analysis_failed", error=str(e), error_type=type(e).__name__)
            return AnalysisResponse(text=ERROR_MESSAGE, success=False)

        if not text:
            return AnalysisResponse(text=EMPTY_RESPONSE_MESSAGE, success=False)

        return AnalysisResponse(text=text, success=True)
