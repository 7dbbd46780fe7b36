from __future__ import annotations

from typing import List, Optional

from src.inside_notes.domain.errors import NotFoundError, ValidationError
from src.inside_notes.domain.models.prompt_template import PromptTemplate

DEFAULT_TEMPLATE_NAME = "Padrão TI Sênior"
DEFAULT_TEMPLATE_CONTENT = (
    "Você é um Especialista de Suporte de TI Sênior. Sua tarefa é reescrever o texto a seguir, "
    "que é uma transcrição bruta ou uma série de anotações de um técnico, em um formato "
    "profissional, claro, organizado e ideal para o entendimento de um cliente final. "
    "Consolide os pontos, mantenha os fatos técnicos, mas melhore a gramática e a estrutura. "
    'Texto Bruto: "[TEXTO_BRUTO_AQUI]"'
)


class InMemoryTemplateService:
    """Ordered list of AI prompt templates used to rewrite annotations.

    Templates are addressed by position, matching how operators manage them
    in the settings screen.
    """

    def __init__(self) -> None:
        self._templates: List[PromptTemplate] = []
        self._seed_defaults()

    def _seed_defaults(self) -> None:
        self._templates.append(PromptTemplate(name=DEFAULT_TEMPLATE_NAME, content=DEFAULT_TEMPLATE_CONTENT))

    def list_templates(self) -> List[PromptTemplate]:
        return list(self._templates)

    def create_template(self, *, name: str, content: str) -> PromptTemplate:
        self._validate(name, content)
        self._check_unique(name)
        tmpl = PromptTemplate(name=name.strip(), content=content)
        self._templates.append(tmpl)
        return tmpl

    def update_template(self, index: int, *, name: str, content: str) -> PromptTemplate:
        self._check_index(index)
        self._validate(name, content)
        self._check_unique(name, ignore_index=index)
        tmpl = PromptTemplate(name=name.strip(), content=content)
        self._templates[index] = tmpl
        return tmpl

    def delete_template(self, index: int) -> None:
        self._check_index(index)
        del self._templates[index]

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= len(self._templates):
            raise NotFoundError("Prompt template not found", details={"index": index})

    def _check_unique(self, name: str, *, ignore_index: Optional[int] = None) -> None:
        # Styles are picked by name, so two templates may not share one.
        wanted = name.strip()
        for i, tmpl in enumerate(self._templates):
            if i != ignore_index and tmpl.name == wanted:
                raise ValidationError("Já existe um prompt com este nome.", details={"name": wanted})

    @staticmethod
    def _validate(name: str, content: str) -> None:
        if not name or not name.strip():
            raise ValidationError("O nome do prompt é obrigatório.", details={"field": "name"})
        if not content or not content.strip():
            raise ValidationError("O conteúdo do prompt é obrigatório.", details={"field": "content"})


template_service = InMemoryTemplateService()
