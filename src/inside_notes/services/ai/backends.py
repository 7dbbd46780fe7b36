from __future__ import annotations

import logging
from typing import Any, List, Optional, Protocol, Sequence

from src.inside_notes.config import settings
from src.inside_notes.domain.errors import CapabilityError
from src.inside_notes.domain.models.annotation import Annotation
from src.inside_notes.domain.models.prompt_template import PromptTemplate
from src.inside_notes.domain.models.visit import Visit
from src.inside_notes.services.reports.prompt import KIND_TAGS, build_report_prompt

logger = logging.getLogger(__name__)

TRANSCRIPTION_INSTRUCTIONS = (
    "Transcreva este áudio para o português do Brasil. "
    "O áudio contém uma anotação de um técnico de TI em campo."
)


class GenerativeTextBackend(Protocol):
    """Protocol for the external generative-text capability.

    Every call either returns text or raises CapabilityError with a
    human-readable message; implementations must not leak provider-specific
    exceptions to callers.
    """

    async def rewrite(self, text: str, style: str) -> str:  # pragma: no cover - interface
        """Rewrite consolidated fragments using a prompt template's content."""
        raise NotImplementedError

    async def transcribe(self, audio: bytes, mime_type: str) -> str:  # pragma: no cover - interface
        raise NotImplementedError

    async def summarize(
        self,
        visit: Visit,
        annotations: Sequence[Annotation],
        technician_name: Optional[str] = None,
    ) -> str:  # pragma: no cover - interface
        raise NotImplementedError

    async def ping(self) -> bool:  # pragma: no cover - interface
        """Return True when the provider credential works."""
        raise NotImplementedError


class DemoGenerativeBackend:
    """Deterministic, offline backend used by default and in tests.

    Output is derived from the input so callers can assert on it without any
    network access.
    """

    async def rewrite(self, text: str, style: str) -> str:
        lines = [line[2:] if line.startswith("- ") else line for line in text.split("\n\n")]
        return "Resumo técnico: " + " ".join(line.strip().rstrip(".") + "." for line in lines if line.strip())

    async def transcribe(self, audio: bytes, mime_type: str) -> str:
        if not audio:
            return ""
        return f"Transcrição de demonstração ({len(audio)} bytes, {mime_type})"

    async def summarize(
        self,
        visit: Visit,
        annotations: Sequence[Annotation],
        technician_name: Optional[str] = None,
    ) -> str:
        lines: List[str] = [f"Laudo técnico - {visit.client_name}"]
        lines.append(f"Técnico Responsável: {technician_name or 'Não informado'}")
        for annotation in annotations:
            lines.append(f"{KIND_TAGS[annotation.kind]}: {annotation.body}")
        return "\n".join(lines)

    async def ping(self) -> bool:
        return True


class OpenAIGenerativeBackend:
    """Generative backend that uses the OpenAI Python client.

    Rewrites and summaries go through the Responses API with LLM_MODEL; audio
    goes through the transcription endpoint with TRANSCRIPTION_MODEL. A missing
    OPENAI_API_KEY is reported as a CapabilityError before any request is made.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str | None = None,
        transcription_model: str | None = None,
        temperature: float | None = None,
    ) -> None:
        self._api_key = api_key or settings.openai_api_key
        self._model = model or settings.llm_model
        self._transcription_model = transcription_model or settings.transcription_model
        self._temperature = temperature if temperature is not None else settings.rewrite_temperature
        self._client = None

    def _get_client(self):
        if not self._api_key:
            raise CapabilityError("Chave da API não configurada no ambiente.", details={"provider": "openai"})
        if self._client is None:
            try:
                from openai import AsyncOpenAI
            except ImportError as exc:  # pragma: no cover - depends on installed extras
                raise CapabilityError(
                    "OpenAIGenerativeBackend requires the 'openai' package. Install it with 'pip install openai'"
                ) from exc
            self._client = AsyncOpenAI(api_key=self._api_key)
        return self._client

    @staticmethod
    def _output_text(response: Any) -> str:
        text = getattr(response, "output_text", None)
        if text:
            return text
        for output in getattr(response, "output", None) or []:
            for item in getattr(output, "content", None) or []:
                if getattr(item, "type", "") == "output_text" and getattr(item, "text", None):
                    return item.text
        return ""

    async def _complete(self, prompt: str, *, failure_message: str, temperature: float | None = None) -> str:
        client = self._get_client()
        kwargs: dict = {"model": self._model, "input": [{"role": "user", "content": prompt}]}
        if temperature is not None:
            kwargs["temperature"] = temperature
        try:
            response = await client.responses.create(**kwargs)
        except Exception as exc:
            logger.exception("OpenAI request failed")
            raise CapabilityError(failure_message) from exc
        text = self._output_text(response).strip()
        if not text:
            raise CapabilityError(failure_message, details={"reason": "empty_response"})
        return text

    async def rewrite(self, text: str, style: str) -> str:
        prompt = PromptTemplate(name="rewrite", content=style).render(text)
        return await self._complete(
            prompt,
            failure_message="Falha ao refinar a transcrição pela API de IA.",
            temperature=self._temperature,
        )

    async def transcribe(self, audio: bytes, mime_type: str) -> str:
        client = self._get_client()
        extension = mime_type.split("/")[-1].split(";")[0] or "webm"
        try:
            result = await client.audio.transcriptions.create(
                model=self._transcription_model,
                file=(f"anotacao.{extension}", audio, mime_type),
                language="pt",
                prompt=TRANSCRIPTION_INSTRUCTIONS,
            )
        except Exception as exc:
            logger.exception("OpenAI transcription failed")
            raise CapabilityError("Falha ao transcrever o áudio pela API de IA.") from exc
        return (getattr(result, "text", "") or "").strip()

    async def summarize(
        self,
        visit: Visit,
        annotations: Sequence[Annotation],
        technician_name: Optional[str] = None,
    ) -> str:
        prompt = build_report_prompt(visit, annotations, technician_name)
        return await self._complete(prompt, failure_message="Falha ao gerar o resumo do laudo pela API de IA.")

    async def ping(self) -> bool:
        try:
            await self._complete("hello", failure_message="API key check failed")
        except CapabilityError:
            logger.warning("Generative backend credential check failed")
            return False
        return True


demo_generative_backend = DemoGenerativeBackend()


def get_generative_backend_from_env() -> GenerativeTextBackend:
    """Select a generative backend based on the AI_BACKEND environment variable.

    - AI_BACKEND=openai → OpenAIGenerativeBackend
    - Anything else (or unset) → DemoGenerativeBackend
    """

    backend_name = settings.ai_backend.lower()
    if backend_name == "openai":
        return OpenAIGenerativeBackend()
    return demo_generative_backend
