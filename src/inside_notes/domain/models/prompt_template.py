from __future__ import annotations

from pydantic import BaseModel

# Token replaced with the consolidated fragment text before a rewrite call.
RAW_TEXT_PLACEHOLDER = "[TEXTO_BRUTO_AQUI]"


class PromptTemplate(BaseModel):
    name: str
    content: str

    def render(self, raw_text: str) -> str:
        quoted = f'"{raw_text}"'
        if RAW_TEXT_PLACEHOLDER in self.content:
            return self.content.replace(RAW_TEXT_PLACEHOLDER, quoted)
        # Templates without the placeholder still get the text to rewrite.
        return f"{self.content}\n{quoted}"
