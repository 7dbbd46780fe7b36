from __future__ import annotations

from typing import Dict, Iterable, Optional

from src.inside_notes.domain.models.annotation import Annotation, AnnotationKind
from src.inside_notes.domain.models.visit import Visit, VisitStatus

STATUS_LABELS: Dict[VisitStatus, str] = {
    VisitStatus.SCHEDULED: "Agendada",
    VisitStatus.OPEN: "Aberta",
    VisitStatus.IN_PROGRESS: "Em Andamento",
    VisitStatus.COMPLETED: "Concluída",
}

KIND_TAGS: Dict[AnnotationKind, str] = {
    AnnotationKind.DIAGNOSIS: "DIAGNOSTICO",
    AnnotationKind.ACTION: "ACAO",
    AnnotationKind.TEST: "TESTE",
    AnnotationKind.OBSERVATION: "OBSERVACAO",
}

UNKNOWN_TECHNICIAN = "Não informado"


def format_visit_date(visit: Visit) -> str:
    return visit.start_time.strftime("%d/%m/%Y, %H:%M:%S")


def annotation_lines(annotations: Iterable[Annotation]) -> str:
    return "\n".join(f"- {KIND_TAGS[a.kind]}: {a.body}" for a in annotations)


def build_report_prompt(
    visit: Visit,
    annotations: Iterable[Annotation],
    technician_name: Optional[str] = None,
) -> str:
    """Build the pt-BR prompt sent to the summarization capability.

    Sections appear in a fixed order (client, site, date, technician, status)
    followed by one line per annotation tagged with its kind.
    """

    return (
        "Gere um laudo técnico conciso e profissional em Português (Brasil) para a seguinte visita técnica.\n"
        "O laudo deve ser estruturado com as seções: Cliente, Local, Data, Técnico Responsável, "
        "Diagnóstico, Ações Executadas e Testes Realizados.\n"
        "\n"
        "### Dados da Visita ###\n"
        f"Cliente: {visit.client_name}\n"
        f"Local: {visit.extra_description or ''}\n"
        f"Data: {format_visit_date(visit)}\n"
        f"Técnico Responsável: {technician_name or UNKNOWN_TECHNICIAN}\n"
        f"Status Atual: {STATUS_LABELS[visit.status]}\n"
        "\n"
        "### Anotações Detalhadas ###\n"
        f"{annotation_lines(annotations)}\n"
        "\n"
        "Baseado nas anotações, sintetize as informações em suas respectivas seções no laudo final.\n"
        "Seja claro e objetivo."
    )
