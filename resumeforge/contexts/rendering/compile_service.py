"""
Remote LaTeX Compilation

Compiles LaTeX source to PDF through public compilation services, trying
each configured provider in priority order until one returns a PDF. When
every provider fails, CompilationServiceError carries the source and the
per-provider errors so the caller can offer manual recovery
(see fallback_page).

Providers are configured in config/compile_providers.yaml.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

import httpx
from dotenv import load_dotenv
from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape
from omegaconf import OmegaConf

from resumeforge.contexts.rendering.exporter import PDF_MIME, ExportArtifact, export_filename
from resumeforge.contexts.rendering.logger import (
    _log_error,
    log_provider_attempt,
    log_provider_result,
)
from resumeforge.contexts.templating.dispatch import OutputFormat, render
from resumeforge.contexts.templating.resume_data_structure import ResumeDocument
from resumeforge.contexts.templating.template_ids import LatexTemplate

load_dotenv()
_CONTEXT_DIR = Path(__file__).parent
COMPILE_PROVIDERS_PATH = Path(
    os.getenv("COMPILE_PROVIDERS_PATH", str(_CONTEXT_DIR / "config" / "compile_providers.yaml"))
)
COMPILE_TIMEOUT_S = float(os.getenv("COMPILE_TIMEOUT_S", "30"))
FALLBACK_TEMPLATE_PATH = _CONTEXT_DIR / "template" / "service"

ERROR_TEXT_LIMIT = 200


@dataclass(frozen=True)
class CompileProvider:
    """
    One remote compilation endpoint.

    Attributes:
        name: Display name used in logs and error strings
        url: Endpoint receiving the POST
        body: "form" (url-encoded fields) or "raw" (source as the body)
        source_field: Form field holding the LaTeX source (form bodies only)
        fields: Extra form fields sent unchanged
    """

    name: str
    url: str
    body: str = "form"
    source_field: str = "text"
    fields: Dict[str, str] = field(default_factory=dict)

    def request_kwargs(self, latex_source: str) -> dict:
        """Keyword arguments for httpx.Client.post."""
        if self.body == "raw":
            return {
                "content": latex_source.encode("utf-8"),
                "headers": {"Content-Type": "application/x-www-form-urlencoded"},
            }
        return {"data": {self.source_field: latex_source, **self.fields}}


def load_providers(config_path: Path = None) -> List[CompileProvider]:
    """
    Load providers from YAML, in priority order.

    Raises:
        ValueError: If a provider declares an unknown body kind
    """
    config = OmegaConf.to_container(OmegaConf.load(config_path or COMPILE_PROVIDERS_PATH), resolve=True)
    providers = []
    for entry in config.get("providers", []):
        provider = CompileProvider(
            name=entry["name"],
            url=entry["url"],
            body=entry.get("body", "form"),
            source_field=entry.get("source_field", "text"),
            fields=dict(entry.get("fields") or {}),
        )
        if provider.body not in ("form", "raw"):
            raise ValueError(f"Provider {provider.name}: unknown body kind '{provider.body}'")
        providers.append(provider)
    return providers


class CompilationServiceError(Exception):
    """
    Raised when every compilation provider failed.

    Attributes:
        latex_source: The source that could not be compiled
        attempts: Names of the providers tried, in order
        errors: One error string per failed provider
    """

    def __init__(self, latex_source: str, attempts: List[str], errors: List[str]):
        self.latex_source = latex_source
        self.attempts = attempts
        self.errors = errors
        super().__init__(f"All {len(attempts)} compilation providers failed: " + "; ".join(errors))


class RemoteLaTeXCompiler:
    """
    Client for remote LaTeX compilation with provider fallback.

    Args:
        providers: Providers in priority order (default: loaded from YAML)
        timeout: Per-request timeout in seconds
        client: httpx.Client to send requests with (tests inject one backed
                by httpx.MockTransport)
    """

    def __init__(
        self,
        providers: Optional[List[CompileProvider]] = None,
        timeout: float = COMPILE_TIMEOUT_S,
        client: Optional[httpx.Client] = None,
    ):
        self.providers = providers if providers is not None else load_providers()
        self.timeout = timeout
        self._client = client

    def _attempt(self, client: httpx.Client, provider: CompileProvider, latex_source: str) -> bytes:
        """
        One provider attempt.

        Raises:
            RuntimeError: Carrying the error string recorded for this provider
        """
        try:
            response = client.post(provider.url, timeout=self.timeout, **provider.request_kwargs(latex_source))
        except httpx.TimeoutException:
            raise RuntimeError(f"{provider.name} timed out") from None
        except httpx.HTTPError as e:
            raise RuntimeError(f"{provider.name} error: {e}") from e

        if not response.is_success:
            raise RuntimeError(f"{provider.name}: {response.status_code} - {response.text[:ERROR_TEXT_LIMIT]}")
        if "application/pdf" not in response.headers.get("content-type", ""):
            raise RuntimeError(f"{provider.name} error: Invalid response format from {provider.name}")
        if not response.content:
            raise RuntimeError(f"{provider.name} error: Empty PDF received")
        return response.content

    def compile(self, latex_source: str) -> bytes:
        """
        Compile LaTeX source to PDF bytes.

        Args:
            latex_source: Complete LaTeX document

        Returns:
            PDF bytes from the first provider that succeeded

        Raises:
            CompilationServiceError: If every provider failed
        """
        attempts: List[str] = []
        errors: List[str] = []

        client = self._client or httpx.Client()
        try:
            for provider in self.providers:
                attempts.append(provider.name)
                log_provider_attempt(provider.name, provider.url)
                try:
                    pdf = self._attempt(client, provider, latex_source)
                except RuntimeError as e:
                    errors.append(str(e))
                    log_provider_result(provider.name, False, str(e))
                    continue
                log_provider_result(provider.name, True, f"({len(pdf)} bytes)")
                return pdf
        finally:
            if self._client is None:
                client.close()

        _log_error(f"All compilation providers failed ({', '.join(attempts) or 'none configured'})")
        raise CompilationServiceError(latex_source, attempts, errors)


def compile_document(
    doc: ResumeDocument,
    template: Union[LatexTemplate, str],
    compiler: RemoteLaTeXCompiler = None,
) -> ExportArtifact:
    """
    Render a document to LaTeX and compile it remotely.

    Returns:
        PDF ExportArtifact named "{name}_Resume_{Template}.pdf"

    Raises:
        CompilationServiceError: If every provider failed
    """
    template = LatexTemplate.parse(template)
    latex_source = render(doc, template, OutputFormat.LATEX)
    pdf = (compiler or RemoteLaTeXCompiler()).compile(latex_source)
    return ExportArtifact(
        filename=export_filename(doc.personal_info.full_name, template, "pdf"),
        mime=PDF_MIME,
        content=pdf,
    )


def fallback_page(error: CompilationServiceError, filename: str = "resume.tex") -> str:
    """
    Manual-recovery HTML page: the LaTeX source plus the provider errors.

    Args:
        error: The failure raised by RemoteLaTeXCompiler.compile
        filename: Suggested .tex file name shown on the page

    Returns:
        Complete HTML document (source and errors are HTML-escaped)
    """
    env = Environment(
        loader=FileSystemLoader(str(FALLBACK_TEMPLATE_PATH)),
        autoescape=select_autoescape(["html", "jinja"]),
        undefined=StrictUndefined,
    )
    return env.get_template("fallback.html.jinja").render(
        latex_source=error.latex_source,
        attempts=error.attempts,
        errors=error.errors,
        filename=filename,
    )
