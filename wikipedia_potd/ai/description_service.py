"""Short description generation with Pydantic AI and Google Gemini."""

from typing import Optional

from pydantic_ai import Agent
from pydantic_ai.models import Model
from pydantic_ai.models.google import GoogleModel
from pydantic_ai.providers.google import GoogleProvider

from wikipedia_potd.core.logging_config import get_logger
from wikipedia_potd.server.core.config import GoogleConfig

logger = get_logger(__name__)

SYSTEM_PROMPT = "You are a helpful assistant that summarizes text."
USER_PROMPT_TEMPLATE = "Shorten the following paragraph into a short 12 word or so sentence summary: {text}"


class DescriptionAiService:
    """Summarizes Picture of the Day descriptions into one short sentence.

    The underlying agent is created on first use, so the service can be
    constructed without an API key. Pass ``model`` to use another Pydantic AI
    model, e.g. ``TestModel`` in tests.
    """

    def __init__(self, config: Optional[GoogleConfig] = None, *, model: Optional[Model] = None) -> None:
        self._config = config or GoogleConfig()
        self._model = model
        self._agent: Optional[Agent] = None

    def _create_model(self) -> Model:
        api_key_secret = self._config.api_key
        api_key: Optional[str] = api_key_secret.get_secret_value() if api_key_secret else None
        if not api_key:
            raise RuntimeError("GOOGLE_API_KEY environment variable is not set")

        logger.debug(f"Creating Google model: {self._config.model} with Pydantic AI")
        return GoogleModel(self._config.model, provider=GoogleProvider(api_key=api_key))

    def _get_agent(self) -> Agent:
        if self._agent is None:
            model = self._model or self._create_model()
            self._agent = Agent(model, output_type=str, system_prompt=SYSTEM_PROMPT)
        return self._agent

    async def summarize(self, text: str) -> str:
        """Summarize ``text`` into a sentence of about twelve words.

        Raises:
            RuntimeError: If no Google API key is configured.
        """
        agent = self._get_agent()
        result = await agent.run(USER_PROMPT_TEMPLATE.format(text=text))
        summary = result.output.strip()
        logger.debug(f"Generated short description: {summary}")
        return summary
