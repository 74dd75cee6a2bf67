from __future__ import annotations

import logging
from pathlib import Path
from typing import Awaitable, Callable, Optional

from ampify.core.exceptions import ConversionError, ValidatorUnavailableError
from ampify.core.managers.config_manager import config_manager
from ampify.core.utils.console_logger import ConsoleLogger
from converter.model import ConversionResult, ConversionSettings
from converter.services.boilerplate_service import (
    add_amp_boilerplate,
    fill_placeholders,
    read_inline_css,
    strip_head_duplicates,
)
from converter.services.markup_cleanup_service import (
    remove_attribute,
    remove_disallowed_tags,
    replace_tag,
)
from converter.services.page_parse_service import PageParseService
from converter.services.url_rewrite_service import (
    rewrite_document_relative_urls,
    rewrite_protocol_relative_urls,
    rewrite_relative_urls,
)
from converter.utils.run_timers import RunTimers
from renderer.model import RenderedPage
from renderer.services.generate_default_user_agent_service import generate_default_user_agent
from renderer.services.http_request_service import HttpRequestService
from renderer.services.page_render_service import PageRenderService
from renderer.utils.url_utils import UrlUtils
from validator.model import ValidationReport
from validator.services.amp_validator_service import AmpValidatorService
from validator.services.report_parse_service import get_disallowed_attributes, get_disallowed_tags

logger = logging.getLogger(__name__)

PageLoader = Callable[[str], Awaitable[RenderedPage]]

MAX_LISTED_ERRORS = 10


class ConvertController:
    """
    Runs the page-to-AMP pipeline: load, validate, clean up, rewrite URLs,
    add boilerplate, inline CSS, write. Steps run strictly one after the other.

    The page loader and validator can be injected; by default they are built
    from the 'renderer', 'session' and 'validator' config sections.
    """

    def __init__(
            self,
            *,
            page_loader: Optional[PageLoader] = None,
            validator: Optional[AmpValidatorService] = None,
            console: Optional[ConsoleLogger] = None,
    ) -> None:
        self.page_loader = page_loader
        self.validator = validator or AmpValidatorService(config_manager.get_nested("validator", {}))
        self.console = console or ConsoleLogger("Main")

    # -------- Loading --------

    async def _load_page(self, url: str, render: bool) -> RenderedPage:
        if self.page_loader is not None:
            return await self.page_loader(url)

        user_agent = generate_default_user_agent()
        if render:
            service = PageRenderService(config_manager.get_nested("renderer", {}), user_agent=user_agent)
            return await service.render(url)

        http_config = {"session": config_manager.get_nested("session", {})}
        async with HttpRequestService(http_config, user_agent) as service:
            return await service.fetch(url)

    # -------- Validation --------

    async def _validate_source(self, html: str, settings: ConversionSettings) -> ValidationReport:
        try:
            return await self.validator.validate(html)
        except ValidatorUnavailableError as e:
            if settings.fail_on_validator_unavailable:
                raise
            logger.warning("Continuing without validator error list: %s", e)
            with self.console.grouped():
                self.console.error(f"Validator unavailable: {e}")
                self.console.update("Only the fixed tag removal and URL rewrites will be applied")
            return ValidationReport(status="UNKNOWN")

    async def _verify_output(self, html: str) -> Optional[ValidationReport]:
        try:
            report = await self.validator.validate(html)
        except ValidatorUnavailableError as e:
            logger.warning("Skipping output verification: %s", e)
            with self.console.grouped():
                self.console.error(f"Validator unavailable: {e}")
            return None

        with self.console.grouped():
            if report.passed:
                self.console.passed("PASS")
            else:
                self.console.failed(f"{report.status}: {report.error_count} error(s) remaining")
                with self.console.grouped():
                    for error in report.errors[:MAX_LISTED_ERRORS]:
                        self.console.status(error.format(with_spec_url=True))
                    if len(report.errors) > MAX_LISTED_ERRORS:
                        self.console.status(f"... and {len(report.errors) - MAX_LISTED_ERRORS} more")
        return report

    # -------- Output --------

    @staticmethod
    def _write(path: Path, content: str) -> Path:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise ConversionError(f"Could not write {path}: {e}") from e
        logger.debug("Wrote %d characters to %s", len(content), path)
        return path

    # -------- Pipeline --------

    async def run(self, settings: ConversionSettings) -> ConversionResult:
        url = UrlUtils.ensure_scheme(settings.url)
        domain = UrlUtils.get_base_url(url)
        if not domain:
            raise ConversionError(f"Invalid URL: '{settings.url}'")

        console = self.console
        output_dir = Path(settings.output_dir)

        with RunTimers() as timers:
            if settings.render:
                console.instruction("Getting rendered HTML from headless Chromium")
            else:
                console.instruction("Fetching HTML over HTTP (no rendering)")
            page = await self._load_page(url, settings.render)
            original_path = self._write(output_dir / settings.original_file_name, page.content)
            timers.lap("load")

            console.instruction("Running AMP validation")
            report = await self._validate_source(page.content, settings)
            messages = report.messages
            logger.debug("Validator messages: %s", messages)
            timers.lap("validate")

            html = page.content

            console.instruction("Checking for disallowed tags")
            with console.grouped():
                html = remove_disallowed_tags(html, keep_json_ld=settings.keep_json_ld)

            console.instruction("Checking for disallowed attributes")
            attributes = get_disallowed_attributes(messages)
            with console.grouped():
                for attribute in attributes:
                    console.status(f"Removing attribute: {attribute}")
                    html = remove_attribute(html, attribute)

            console.instruction("Checking for disallowed custom tags")
            tags = sorted(get_disallowed_tags(messages))
            with console.grouped():
                for tag in tags:
                    console.status(f"Replacing custom tag <{tag}> with a <{settings.replacement_tag}>")
                    html = replace_tag(html, tag, settings.replacement_tag)
            timers.lap("cleanup")

            console.instruction("Changing protocol relative URLs to absolute URLs")
            html = rewrite_protocol_relative_urls(html)

            console.instruction(f"Replacing relative URLs with absolute URLs using domain: {domain}")
            html = rewrite_relative_urls(html, domain)

            page_url = page.final_url or url
            if settings.rewrite_document_relative:
                console.instruction(f"Resolving document relative URLs against: {page_url}")
                html = rewrite_document_relative_urls(html, page_url)
            timers.lap("urls")

            console.instruction("Adding AMP boilerplate")
            parser = PageParseService(page.content, page_url)
            title = parser.extract_page_title()
            canonical_url = parser.extract_canonical_tag() or url
            lang = parser.extract_html_lang() or settings.lang
            html = strip_head_duplicates(html)
            html = add_amp_boilerplate(html, lang=lang)

            console.instruction(f"Inlining CSS from {settings.css_path.name}")
            css = read_inline_css(Path(settings.css_path))
            html = fill_placeholders(html, title=title, canonical_url=canonical_url, css=css)
            timers.lap("boilerplate")

            console.instruction(f"Writing modified HTML file to {settings.modified_file_name}")
            modified_path = self._write(output_dir / settings.modified_file_name, html)

            verification = None
            if settings.verify_output:
                console.instruction("Validating modified HTML")
                verification = await self._verify_output(html)
                timers.lap("verify")

        console.complete("Finished!")
        logger.info("Converted %s in %.2fs", url, timers.duration)

        return ConversionResult(
            url=url,
            domain=domain,
            original_path=original_path,
            modified_path=modified_path,
            rendered=page.rendered,
            validation_status=report.status,
            initial_error_count=len(report.errors),
            removed_attributes=attributes,
            replaced_tags=tags,
            verification_status=verification.status if verification else None,
            remaining_error_count=len(verification.errors) if verification else None,
            timers=dict(timers.laps),
            duration=round(timers.duration, 4),
        )
