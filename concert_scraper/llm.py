import json

import requests

from concert_scraper import config
from concert_scraper.errors import ConfigurationError, ExtractionError, TransientExtractionError
from concert_scraper.pipeline.runlog import print_log
from concert_scraper.pipeline.validate import clean_extraction
from concert_scraper.utils.locations import describe_canonical_cities

SYSTEM_PROMPT = "You are a JSON-only response bot. You must return valid, parseable JSON."

EXTRACTION_PROMPT = """You are a concert information extractor. Your task is to extract concert dates, locations, and the press contact from the provided text.

You MUST:
1. Return ONLY valid JSON in the exact format specified
2. Include ONLY confirmed dates and locations
3. Format dates as "DD month YYYY" with the month written out (e.g., "24 juni 2025")
4. Format locations as "Venue, City" with exactly one comma (e.g., "Vorst Nationaal, Brussel")
5. Spell these cities exactly like this:
{cities}
6. List each (date, location) pair only once
7. Ensure all strings are properly escaped
8. Return an empty events array if no valid events are found

Required JSON format:
{{
  "events": [
    {{
      "date": "DD month YYYY",
      "location": "Venue Name, City"
    }}
  ],
  "contact": {{
    "name": "Full Name",
    "email": "email@address"
  }}
}}

Only include "contact" when the text names a press or media contact. If there is none, omit the contact field entirely.
Do not include any explanatory text or notes in your response.
Your response must be parseable JSON.

Text to analyze:
{text}"""


def build_prompt(text):
    return EXTRACTION_PROMPT.format(cities=describe_canonical_cities(), text=text)


class Extractor:
    """
    Turns a page excerpt into {events, contact?} with an OpenAI-compatible chat completions API.

    Malformed JSON, a missing "events" list and transport errors are retried
    immediately up to max_retries times; after that ExtractionError is raised.
    A missing API key raises ConfigurationError without any request.
    """

    def __init__(self, openai_config=None, session=None, log_func=None):
        self.config = openai_config or config.OpenAIConfig()
        self.session = session or requests.Session()
        self.log = log_func or print_log

    @property
    def endpoint(self):
        return f"{self.config.base_url}/chat/completions"

    def extract(self, text):
        if not self.config.api_key:
            self.log("OpenAI API key not found", "WARNING")
            raise ConfigurationError("OpenAI API key not configured")

        max_retries = self.config.max_retries
        for attempt in range(max_retries + 1):
            try:
                payload = self._request_payload(text)
            except TransientExtractionError as e:
                if attempt < max_retries:
                    self.log(f"  {e}, retrying (attempt {attempt + 1}/{max_retries})", "WARNING")
                    continue
                self.log(f"  Error using LLM for extraction after {max_retries} retries: {e}", "ERROR")
                raise ExtractionError(f"Extraction failed after {max_retries} retries: {e}") from e

            return clean_extraction(payload, log_func=self.log)

    def _request_payload(self, text):
        """One completion request; returns the parsed JSON object or raises TransientExtractionError."""
        body = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(text)},
            ],
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
            "response_format": {"type": "json_object"},
        }
        headers = {"Authorization": f"Bearer {self.config.api_key}"}

        try:
            resp = self.session.post(self.endpoint, json=body, headers=headers, timeout=self.config.timeout)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise TransientExtractionError(f"API error: {e}") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        if not content:
            raise TransientExtractionError("No response from OpenAI")

        try:
            payload = json.loads(content)
        except ValueError as e:
            raise TransientExtractionError(f"JSON parse error: {e}") from e

        if not isinstance(payload, dict) or not isinstance(payload.get("events"), list):
            raise TransientExtractionError("Invalid response format: events is not an array")
        return payload
