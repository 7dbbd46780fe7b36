import pytest

from src.inside_notes.domain.errors import NotFoundError, ValidationError
from src.inside_notes.domain.models.prompt_template import PromptTemplate
from src.inside_notes.services.templates.service import DEFAULT_TEMPLATE_NAME, InMemoryTemplateService


def test_render_replaces_placeholder_with_quoted_text():
    template = PromptTemplate(name="t", content='Reescreva. Texto Bruto: [TEXTO_BRUTO_AQUI]')

    assert template.render("- a\n\n- b") == 'Reescreva. Texto Bruto: "- a\n\n- b"'


def test_render_appends_text_when_placeholder_is_missing():
    template = PromptTemplate(name="t", content="Reescreva de forma formal.")

    assert template.render("- a") == 'Reescreva de forma formal.\n"- a"'


def test_templates_are_managed_by_position():
    service = InMemoryTemplateService()
    assert [t.name for t in service.list_templates()] == [DEFAULT_TEMPLATE_NAME]

    service.create_template(name="Curto", content="Resuma: [TEXTO_BRUTO_AQUI]")
    service.update_template(1, name="Curtíssimo", content="Resuma muito: [TEXTO_BRUTO_AQUI]")
    assert [t.name for t in service.list_templates()] == [DEFAULT_TEMPLATE_NAME, "Curtíssimo"]

    service.delete_template(0)
    assert [t.name for t in service.list_templates()] == ["Curtíssimo"]

    with pytest.raises(NotFoundError):
        service.delete_template(5)
    with pytest.raises(ValidationError):
        service.create_template(name="  ", content="x")


def test_template_names_must_be_unique():
    service = InMemoryTemplateService()
    service.create_template(name="Formal", content="Reescreva formalmente: [TEXTO_BRUTO_AQUI]")

    with pytest.raises(ValidationError) as duplicate:
        service.create_template(name="  Formal ", content="Outro: [TEXTO_BRUTO_AQUI]")
    assert duplicate.value.message == "Já existe um prompt com este nome."
    with pytest.raises(ValidationError):
        service.update_template(1, name=DEFAULT_TEMPLATE_NAME, content="x")

    renamed = service.update_template(1, name="Formal", content="Reescreva: [TEXTO_BRUTO_AQUI]")
    assert renamed.content == "Reescreva: [TEXTO_BRUTO_AQUI]"
    assert [t.name for t in service.list_templates()] == [DEFAULT_TEMPLATE_NAME, "Formal"]
