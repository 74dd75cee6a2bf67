# src/validator/services/amp_validator_service.py
import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

from ampify.core.exceptions import ValidatorUnavailableError
from validator.model import ValidationError, ValidationReport

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = ["amphtml-validator"]


class AmpValidatorService:
    """
    Runs the official AMP validator CLI (npm package 'amphtml-validator')
    against an HTML string and turns its JSON report into a ValidationReport.

    The document is piped over stdin; the CLI exits non-zero for a FAIL
    verdict, so the exit code alone is not treated as an error.
    """

    def __init__(self, config: Dict):
        self.config = config
        command = config.get('command') or DEFAULT_COMMAND
        self.command: List[str] = [command] if isinstance(command, str) else list(command)
        self.timeout = float(config.get('timeout', 60))
        self.validator_js: Optional[str] = config.get('validator_js')

    def _build_args(self) -> List[str]:
        args = list(self.command) + ["--format=json"]
        if self.validator_js:
            args.append(f"--validator_js={self.validator_js}")
        args.append("-")
        return args

    async def validate(self, html: str) -> ValidationReport:
        args = self._build_args()
        logger.debug("Running AMP validator: %s", " ".join(args))
        try:
            proc = await asyncio.create_subprocess_exec(
                *args,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise ValidatorUnavailableError(
                f"AMP validator executable '{args[0]}' not found (npm install -g amphtml-validator)"
            ) from e

        try:
            stdout, stderr = await asyncio.wait_for(
                proc.communicate(input=html.encode("utf-8")), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            proc.kill()
            await proc.wait()
            raise ValidatorUnavailableError(f"AMP validator timed out after {self.timeout:g}s") from e

        report = self.parse_output(stdout.decode("utf-8", errors="replace"))
        if report is None:
            detail = stderr.decode("utf-8", errors="replace").strip()
            raise ValidatorUnavailableError(
                f"AMP validator returned no readable report (exit code {proc.returncode})"
                + (f": {detail.splitlines()[0]}" if detail else "")
            )

        logger.debug("AMP validation finished: %s with %d error(s)", report.status, len(report.errors))
        return report

    @staticmethod
    def parse_output(output: str) -> Optional[ValidationReport]:
        """
        Parses the CLI's `--format=json` output, which maps each input
        ('-' for stdin) to {"status": ..., "errors": [...]}.
        Returns None when the output is not such a document.
        """
        try:
            data = json.loads(output)
        except (json.JSONDecodeError, TypeError):
            return None
        if not isinstance(data, dict):
            return None

        result: Optional[Dict[str, Any]] = data if "status" in data else None
        if result is None:
            result = next((v for v in data.values() if isinstance(v, dict) and "status" in v), None)
        if result is None:
            return None

        errors = [
            ValidationError(
                line=e.get("line", 1),
                col=e.get("col", 0),
                message=e.get("message", ""),
                severity=e.get("severity", "ERROR"),
                spec_url=e.get("specUrl"),
                code=e.get("code"),
                params=[str(p) for p in e.get("params") or []],
            )
            for e in result.get("errors") or []
            if isinstance(e, dict)
        ]
        return ValidationReport(status=str(result.get("status", "UNKNOWN")), errors=errors)
