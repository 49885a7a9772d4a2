import json
import logging
from typing import Any, Callable, List, Optional, Tuple

from pydantic import TypeAdapter, ValidationError

from llm_maps.core.exceptions import ClassifierOutputError, ClassifierUnavailable
from llm_maps.core.llm_providers import BaseLLMProvider
from llm_maps.core.logger import logs
from llm_maps.models.intent_model import GeneralIntent, Intent, PlaceCategory, SearchPlacesIntent
from llm_maps.repos.cache_repo import ResponseCache

SYSTEM_PROMPT = """You are a helpful travel and food assistant. When users ask about places to go, eat, or visit, respond ONLY with JSON in this exact format:

{
  "intent": "search_places",
  "category": "restaurant|cafe|park|museum|hotel|shopping|attraction",
  "location": "specific location mentioned",
  "query": "refined search query for Google Maps",
  "suggestions": ["place name 1", "place name 2", "place name 3"]
}

If the query is not about places, respond with:
{
  "intent": "general",
  "response": "your helpful response here"
}

Be concise and only respond with the JSON format."""

# Order matters: the first category with a matching keyword wins
CATEGORY_KEYWORDS: List[Tuple[PlaceCategory, List[str]]] = [
    (PlaceCategory.RESTAURANT, ["restaurant", "eat", "food", "dinner", "lunch", "breakfast", "pizza",
                                "makan", "restoran", "warung", "kuliner"]),
    (PlaceCategory.CAFE, ["cafe", "coffee", "tea", "kopi", "kafe", "kedai", "warkop"]),
    (PlaceCategory.PARK, ["park", "outdoor", "nature", "taman", "alam", "rekreasi"]),
    (PlaceCategory.MUSEUM, ["museum", "gallery", "art", "galeri", "seni", "sejarah"]),
    (PlaceCategory.HOTEL, ["hotel", "stay", "accommodation", "penginapan"]),
    (PlaceCategory.SHOPPING, ["shop", "mall", "buy", "shopping", "belanja", "pusat perbelanjaan", "toko"]),
]

KNOWN_LOCATIONS = [
    "jakarta", "bali", "bandung", "surabaya", "yogyakarta", "medan", "semarang",
    "manhattan", "new york", "london", "paris", "tokyo",
]

_intent_adapter = TypeAdapter(Intent)


def _choices_message_content(payload: Any) -> Any:
    return payload["choices"][0]["message"]["content"]

def _message_content(payload: Any) -> Any:
    return payload["message"]["content"]

def _content(payload: Any) -> Any:
    return payload["content"]

def _whole_payload(payload: Any) -> Any:
    return payload if isinstance(payload, str) else json.dumps(payload)

# Reply shapes differ between classifier backends; tried in order
EXTRACTION_STRATEGIES: List[Tuple[str, Callable[[Any], Any]]] = [
    ("choices[0].message.content", _choices_message_content),
    ("message.content", _message_content),
    ("content", _content),
    ("payload", _whole_payload),
]


def extract_reply_text(payload: Any) -> str:
    """Return the answer text from a classifier reply, whatever its shape."""
    for name, strategy in EXTRACTION_STRATEGIES:
        try:
            text = strategy(payload)
        except (KeyError, IndexError, TypeError):
            continue
        if isinstance(text, str) and text.strip():
            logs.log(logging.DEBUG, f"Classifier reply text found under {name}")
            return text
    raise ClassifierOutputError("Classifier reply contains no text")


def extract_json_object(text: str) -> dict:
    """
    Find the first JSON object embedded in free text.
    Each "{" is tried in turn as the start of a complete object; when none
    decodes on its own, the span from the first "{" to the last "}" is tried.
    """
    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            parsed, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            start = text.find("{", start + 1)
            continue
        if isinstance(parsed, dict):
            return parsed
        start = text.find("{", start + 1)

    first, last = text.find("{"), text.rfind("}")
    if first != -1 and last > first:
        try:
            parsed = json.loads(text[first:last + 1])
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, dict):
            return parsed

    raise ClassifierOutputError("No JSON object found in classifier reply")


def parse_intent(payload: Any, user_query: str) -> Intent:
    """Turn a raw classifier reply into an Intent or raise ClassifierOutputError."""
    data = extract_json_object(extract_reply_text(payload))
    try:
        intent = _intent_adapter.validate_python(data)
    except ValidationError as e:
        raise ClassifierOutputError(f"Classifier JSON does not match an intent: {e.error_count()} errors") from e

    if isinstance(intent, SearchPlacesIntent) and not (intent.refined_query or "").strip():
        intent = intent.model_copy(update={"refined_query": user_query})
    return intent


def fallback_parse(user_query: str) -> SearchPlacesIntent:
    """Keyword-based classification used whenever the classifier cannot help."""
    lower_query = user_query.lower()

    detected_category = PlaceCategory.POINT_OF_INTEREST
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in lower_query for keyword in keywords):
            detected_category = category
            break

    detected_location: Optional[str] = None
    for location in KNOWN_LOCATIONS:
        if location in lower_query:
            detected_location = location
            break

    return SearchPlacesIntent(
        category=detected_category.value,
        location=detected_location,
        refined_query=user_query,
        suggestions=()
    )


class IntentResolver:
    def __init__(self, provider: BaseLLMProvider, cache: ResponseCache | None = None):
        self.provider = provider
        self.cache = cache
        logs.log(logging.INFO, f"🤖 Intent classifier initialized: {self.provider.get_provider_name()}")

    async def resolve(self, user_query: str) -> Intent:
        """
        Classify a query into an Intent. Never raises: an unreachable classifier,
        an error reply or unparseable output all end in the keyword fallback.
        """
        cache_key = f"intent:{user_query}"
        if self.cache is not None:
            cached = self.cache.get(cache_key)
            if cached is not None:
                logs.log(logging.INFO, f"✓ Intent cache HIT for '{user_query}'")
                return cached

        try:
            intent = await self._classify(user_query)
        except ClassifierUnavailable as e:
            logs.log(logging.WARNING, f"Classifier unavailable, using fallback parser: {str(e)}")
            return fallback_parse(user_query)
        except ClassifierOutputError as e:
            logs.log(logging.WARNING, f"Unusable classifier output, using fallback parser: {str(e)}")
            return fallback_parse(user_query)
        except Exception as e:
            logs.log(logging.ERROR, f"Intent classification failed: {str(e)}")
            return fallback_parse(user_query)

        if self.cache is not None:
            self.cache.set(cache_key, intent)
        return intent

    async def _classify(self, user_query: str) -> Intent:
        if not await self.provider.is_available():
            raise ClassifierUnavailable(f"{self.provider.get_provider_name()} is not reachable")

        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": user_query}
        ]
        logs.log(logging.INFO, f"Sending query to classifier: {user_query}")
        payload = await self.provider.generate(messages, temperature=0.1, top_p=0.9)

        intent = parse_intent(payload, user_query)
        logs.log(logging.INFO, f"Classifier intent: {intent.intent}")
        return intent
