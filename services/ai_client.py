from __future__ import annotations

import http.client
import json
import logging
import os
from datetime import datetime
from typing import Any, Mapping
from urllib import error as urlerror
from urllib import request as urlrequest


logger = logging.getLogger(__name__)

PROVIDERS = {"gemini", "openai", "heuristic"}

SYSTEM_INSTRUCTIONS = (
    "Actúas como asesor pedagógico senior. Redactas análisis de desempeño claros, empáticos y "
    "accionables basados estrictamente en los datos provistos del alumno. Menciona hallazgos, "
    "alertas y próximos pasos."
)


class AIClientError(RuntimeError):
    """El proveedor de IA no respondió o respondió algo inutilizable."""


class AIClient:
    """
    Cliente de IA genérico. Proveedores:

    - gemini (por defecto, GEMINI_API_KEY)
    - openai (OPENAI_API_KEY / AI_API_KEY)
    - heuristic: arma el texto localmente, sin red. Lo usan los tests.

    Si el proveedor falla se levanta AIClientError: no hay fallback silencioso,
    para no guardar un insight que no generó el modelo pedido.
    """

    def __init__(self, config: Mapping | None = None, *, provider_override: str | None = None):
        settings = config if config is not None else os.environ

        provider = (provider_override or settings.get("AI_PROVIDER") or "gemini").strip().lower()
        if provider not in PROVIDERS:
            raise AIClientError(f"Proveedor de IA '{provider}' no soportado.")
        self.provider = provider

        if provider == "gemini":
            self.api_key = settings.get("GEMINI_API_KEY")
            default_model = "gemini-2.5-flash"
            self.api_base = "https://generativelanguage.googleapis.com/v1beta"
        elif provider == "openai":
            self.api_key = settings.get("OPENAI_API_KEY") or settings.get("AI_API_KEY")
            default_model = "gpt-4o-mini"
            self.api_base = (settings.get("AI_API_BASE") or "https://api.openai.com/v1").rstrip("/")
        else:
            self.api_key = None
            default_model = "heuristic"
            self.api_base = None

        self.model = settings.get("AI_MODEL") or default_model
        self.timeout = self._float_setting(settings, "AI_TIMEOUT", default=30.0)

    @staticmethod
    def _float_setting(settings: Mapping, name: str, default: float) -> float:
        raw = settings.get(name)
        if raw in (None, ""):
            return default
        try:
            return float(raw)
        except (TypeError, ValueError):
            logger.warning("Valor inválido para %s=%s. Se usa %s por defecto.", name, raw, default)
            return default

    def generate(self, prompt: str, context: dict) -> dict:
        """
        Devuelve un dict con el texto generado, el modelo y el proveedor.
        """
        if self.provider == "heuristic":
            return self._heuristic_response(prompt, context)

        if not self.api_key:
            raise AIClientError(f"Falta la API key para el proveedor '{self.provider}'.")

        if self.provider == "gemini":
            return self._gemini_response(prompt, context)
        return self._openai_response(prompt, context)

    def _post_json(self, url: str, payload: dict, headers: dict) -> dict:
        request = urlrequest.Request(
            url,
            data=json.dumps(payload).encode("utf-8"),
            headers={"Content-Type": "application/json", **headers},
            method="POST",
        )
        try:
            with urlrequest.urlopen(request, timeout=self.timeout) as response:
                data = response.read().decode("utf-8")
        except urlerror.HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore")
            raise AIClientError(f"{self.provider} HTTP {exc.code}: {detail}") from exc
        except urlerror.URLError as exc:
            raise AIClientError(f"{self.provider} request error: {exc.reason}") from exc
        except TimeoutError as exc:
            raise AIClientError(f"{self.provider} no respondió a tiempo.") from exc
        except (http.client.HTTPException, OSError) as exc:
            raise AIClientError(f"{self.provider} cortó la conexión: {exc}") from exc

        try:
            parsed = json.loads(data)
        except ValueError as exc:
            raise AIClientError(f"{self.provider} devolvió una respuesta que no es JSON.") from exc
        if not isinstance(parsed, dict):
            raise AIClientError(f"{self.provider} devolvió un JSON inesperado.")
        return parsed

    def _gemini_response(self, prompt: str, context: dict) -> dict:
        payload = {
            "systemInstruction": {"parts": [{"text": SYSTEM_INSTRUCTIONS}]},
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        }
        data = self._post_json(
            f"{self.api_base}/models/{self.model}:generateContent",
            payload,
            {"x-goog-api-key": self.api_key},
        )

        try:
            candidate: dict[str, Any] = (data.get("candidates") or [{}])[0]
            parts = (candidate.get("content") or {}).get("parts") or []
            message = "".join(part.get("text", "") for part in parts).strip()
        except (AttributeError, TypeError, IndexError) as exc:
            raise AIClientError("Gemini devolvió una respuesta con formato inesperado.") from exc
        if not message:
            raise AIClientError("Gemini devolvió una respuesta vacía.")

        return {
            "text": message,
            "model": data.get("modelVersion") or self.model,
            "provider": "gemini",
        }

    def _openai_response(self, prompt: str, context: dict) -> dict:
        payload = {
            "model": self.model,
            "temperature": 0.2,
            "messages": [
                {"role": "system", "content": SYSTEM_INSTRUCTIONS},
                {"role": "user", "content": prompt},
            ],
        }
        data = self._post_json(
            f"{self.api_base}/chat/completions",
            payload,
            {"Authorization": f"Bearer {self.api_key}"},
        )

        try:
            choice: dict[str, Any] = (data.get("choices") or [{}])[0]
            message = ((choice.get("message") or {}).get("content") or "").strip()
        except (AttributeError, TypeError, IndexError) as exc:
            raise AIClientError("OpenAI devolvió una respuesta con formato inesperado.") from exc
        if not message:
            raise AIClientError("OpenAI devolvió una respuesta vacía.")

        return {
            "text": message,
            "model": data.get("model") or self.model,
            "provider": "openai",
        }

    def _heuristic_response(self, prompt: str, context: dict) -> dict:
        student = context.get("student", {})
        grades = context.get("grades", [])
        evaluations = context.get("evaluations", [])
        conditions = student.get("conditions", [])
        observations = context.get("observations", [])

        lines = [
            f"Análisis de {student.get('name', 'alumno')} generado automáticamente "
            f"({datetime.utcnow():%d/%m %H:%M} UTC).",
            "",
        ]

        if grades:
            scores = [g["score"] for g in grades if g.get("score") is not None]
            if scores:
                lines.append(f"- Promedio bimestral: {sum(scores) / len(scores):.1f} ({len(scores)} notas)")
            low = sorted({g["subject"] for g in grades if g.get("score") is not None and g["score"] < 6})
            if low:
                lines.append(f"- Materias a reforzar: {', '.join(low)}")

        if evaluations:
            late = sum(1 for e in evaluations if e.get("on_time") is False)
            lines.append(f"- Actividades evaluadas: {len(evaluations)} (fuera de término: {late})")

        if conditions:
            lines.append(f"- Condiciones declaradas: {', '.join(c['name'] for c in conditions)}")

        if observations:
            lines.append(f"- Última observación: {observations[-1]}")

        lines.append("")
        lines.append("Recomendaciones sugeridas:")
        lines.append("- Mantener el seguimiento semanal y reforzar en grupos reducidos.")

        return {
            "text": "\n".join(lines).strip(),
            "model": "heuristic",
            "provider": "heuristic",
        }
