from __future__ import annotations

import json
import logging
from dataclasses import dataclass

import requests

from bjjfed.services.base import ClassifierError

logger = logging.getLogger(__name__)

ACTION_ALLOW = 'allow'
ACTION_WARN = 'warn'
ACTION_BLOCK = 'block'
VALID_ACTIONS = (ACTION_ALLOW, ACTION_WARN, ACTION_BLOCK)

RESPONSE_SCHEMA = {
    'type': 'OBJECT',
    'properties': {
        'action': {'type': 'STRING', 'enum': list(VALID_ACTIONS)},
        'message': {'type': 'STRING'},
    },
    'required': ['action', 'message'],
}


@dataclass
class Classification:
    action: str
    message: str


def build_prompt(name: str, role: str, days_overdue: int) -> str:
    return (
        'You are the financial auditor of a Brazilian jiu-jitsu federation. '
        f'Member: {name}. Role: {role}. Days overdue on the monthly fee: {days_overdue}. '
        'Decide whether access should be allowed, allowed with a warning, or blocked. '
        'Answer with JSON containing "action" (allow, warn or block) and a short '
        '"message" addressed to the member.'
    )


class ClassifierService:
    """Payment-status classification through the Gemini generateContent API."""

    def __init__(self, api_key: str, model: str, api_url: str, timeout: int = 10):
        self._api_key = api_key or ''
        self._model = model
        self._api_url = api_url.rstrip('/')
        self._timeout = timeout

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    def classify(self, name: str, role: str, days_overdue: int = 0) -> Classification:
        if not self.enabled:
            return self._offline_rule(days_overdue)

        url = f'{self._api_url}/models/{self._model}:generateContent'
        payload = {
            'contents': [{'parts': [{'text': build_prompt(name, role, days_overdue)}]}],
            'generationConfig': {
                'responseMimeType': 'application/json',
                'responseSchema': RESPONSE_SCHEMA,
            },
        }
        try:
            response = requests.post(
                url,
                params={'key': self._api_key},
                json=payload,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise ClassifierError(f'Classifier request failed: {e}') from e

        if response.status_code != 200:
            raise ClassifierError(f'Classifier returned status {response.status_code}')

        return self._parse(response)

    @staticmethod
    def _parse(response) -> Classification:
        try:
            body = response.json()
            text = body['candidates'][0]['content']['parts'][0]['text']
            result = json.loads(text)
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ClassifierError(f'Unreadable classifier response: {e}') from e

        action = str(result.get('action', '')).lower()
        if action not in VALID_ACTIONS:
            raise ClassifierError(f'Unknown classifier action: {action!r}')
        return Classification(action=action, message=str(result.get('message', '')))

    @staticmethod
    def _offline_rule(days_overdue: int) -> Classification:
        if days_overdue > 0:
            return Classification(
                action=ACTION_BLOCK,
                message=f'Monthly fee overdue by {days_overdue} days.',
            )
        return Classification(action=ACTION_ALLOW, message='No pending payments found.')
