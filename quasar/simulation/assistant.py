"""
Demo assistant - canned, streamed answers about the asset inventory.

There is no model behind this panel.  Answers come from a fixed table keyed
by verbosity and tone, optionally prefixed with a context sentence when the
question mentions a known topic.  The answer is then streamed word-group by
word-group with a small random delay so the UI looks like a live response.

Delay, randomness and clock are all injectable so tests can run instantly
and reproducibly.
"""

import json
import logging
import random
import time
from datetime import datetime, timezone

from ..core.config import (
    CHUNK_SIZES,
    RESPONSE_FILENAME_PATTERN,
    STREAM_DELAY_JITTER,
    STREAM_INITIAL_DELAY,
    STREAM_MIN_DELAY,
    TONES,
    VERBOSITY_LEVELS,
)

logger = logging.getLogger(__name__)

DEMO_RESPONSES = {
    "short": {
        "technical": (
            "Your infrastructure shows 67% quantum vulnerability across RSA-2048 assets. "
            "Immediate PQC migration recommended for critical systems."
        ),
        "non-technical": (
            "Your systems have significant exposure to future quantum threats. "
            "We recommend upgrading security protocols soon."
        ),
    },
    "medium": {
        "technical": (
            "Analysis reveals 67% of assets use quantum-vulnerable algorithms (RSA-2048, ECC). "
            "Current quantum threat level is at 73%. Post-quantum cryptography migration "
            "should prioritize TLS certificates and API endpoints. Estimated timeline: "
            "6-8 months for full deployment."
        ),
        "non-technical": (
            "Our security systems are at risk from emerging quantum computing technology. "
            "About two-thirds of our digital assets need security upgrades. This is a "
            "significant but manageable project that will take 6-8 months to complete properly."
        ),
    },
    "long": {
        "technical": (
            "Comprehensive quantum risk assessment indicates 73% threat level with 67% asset "
            "vulnerability. Your infrastructure relies heavily on RSA-2048 (342 assets) and "
            "ECDSA-P256 (89 assets), both quantum-vulnerable. Shor's algorithm simulations show "
            "these can be broken within 24 hours by a sufficiently powerful quantum computer. "
            "Recommended migration path: 1) Prioritize internet-facing TLS certificates and "
            "authentication endpoints, 2) Deploy CRYSTALS-Kyber for key exchange, 3) Implement "
            "ML-DSA for digital signatures. Estimated performance impact: 15-20% latency "
            "increase, 30% higher CPU utilization during initial rollout. Full migration "
            "timeline: 8-12 months with phased deployment."
        ),
        "non-technical": (
            "Your organization faces growing security risks from quantum computing advances. "
            "Currently, about 70% of your digital security systems use older encryption methods "
            "that quantum computers could break. This affects everything from customer data to "
            "internal communications. The good news: proven quantum-safe solutions exist and can "
            "be deployed over the next year. The transition will require careful planning to "
            "avoid disrupting business operations. We'll prioritize customer-facing systems "
            "first, then internal infrastructure. Expect minor performance impacts during "
            "rollout, but long-term security benefits far outweigh short-term costs. Executive "
            "approval and budget allocation needed for Q1 next year."
        ),
    },
}

# Checked in order; the first keyword found in the question wins
CONTEXTUAL_KEYWORDS = [
    ("risk", "Based on QUASAR data, your top risks include: RSA-2048 certificates "
             "(342 assets), vulnerable APIs, and legacy authentication systems."),
    ("migration", "Migration priority: 89 assets flagged critical. Recommend starting with "
                  "internet-facing TLS endpoints and customer authentication layers."),
    ("compliance", "Current compliance score: 67%. NIST PQC standards require migration by "
                   "2025. You're on track but need acceleration."),
    ("certificate", "Certificate analysis: 127 expired or expiring within 90 days. 89 use "
                    "quantum-vulnerable algorithms. Renewal + PQC upgrade recommended."),
    ("performance", "PQC performance impact: +15-20% latency, +30% CPU. ML-DSA signatures 2x "
                    "slower than ECDSA but quantum-safe."),
]

LENGTH_INSTRUCTIONS = {
    "short": " Answer in 1–2 short sentences.",
    "medium": " Answer in 4–6 sentences.",
    "long": " Answer in 8–12 sentences.",
}

TONE_INSTRUCTIONS = {
    "technical": " Use a technical tone.",
    "non-technical": " Use a management-friendly non-technical tone.",
}

QUICK_ACTIONS = {
    "summarize": "Summarize the previous response in bullet points.",
    "extract": "Extract actionable items from the previous response.",
}

EXAMPLE_QUESTIONS = [
    "What are the top quantum risks in my infrastructure?",
    "Which assets need urgent migration to post-quantum cryptography?",
    "Show me performance impact of PQC migration",
    "What is my current compliance score?",
    "List expired certificates that need renewal",
    "Recommend migration priorities for RSA-2048 assets",
]


def _check_options(verbosity, tone):
    if verbosity not in VERBOSITY_LEVELS:
        raise ValueError(f"Unknown verbosity: {verbosity!r}")
    if tone not in TONES:
        raise ValueError(f"Unknown tone: {tone!r}")


def build_response(question, verbosity="medium", tone="technical"):
    """Full answer text for a question, before streaming."""
    _check_options(verbosity, tone)
    response = DEMO_RESPONSES[verbosity][tone]

    lowered = (question or "").lower()
    for keyword, context in CONTEXTUAL_KEYWORDS:
        if keyword in lowered:
            response = f"{context} {response}"
            break
    return response


def chunk_response(response, verbosity="medium"):
    """Split an answer into word groups, each with a trailing space."""
    size = CHUNK_SIZES[verbosity]
    words = response.split(" ")
    return [
        " ".join(words[i:i + size]) + " "
        for i in range(0, len(words), size)
    ]


def stream_response(question, verbosity="medium", tone="technical", rng=None, sleep=time.sleep):
    """Yield answer chunks with a typing-style delay between them.

    Args:
        question: User question text.
        verbosity: short / medium / long.
        tone: technical / non-technical.
        rng: random.Random used for delay jitter.
        sleep: Callable taking seconds; replaced by a no-op in tests.
    """
    rng = rng or random.Random()
    response = build_response(question, verbosity, tone)
    logger.debug(f"Streaming {verbosity}/{tone} response ({len(response)} chars)")

    sleep(STREAM_INITIAL_DELAY)
    for chunk in chunk_response(response, verbosity):
        yield chunk
        sleep(STREAM_MIN_DELAY + rng.random() * STREAM_DELAY_JITTER)


def enhance_query(query, verbosity="medium", tone="technical"):
    """Append length and tone instructions to a user query."""
    if not query or not query.strip():
        raise ValueError("Please enter a query")
    _check_options(verbosity, tone)
    return query + LENGTH_INSTRUCTIONS[verbosity] + TONE_INSTRUCTIONS[tone]


def quick_action_query(action):
    """Follow-up prompt for a quick-action button."""
    try:
        return QUICK_ACTIONS[action]
    except KeyError:
        raise ValueError(f"Unknown quick action: {action!r}") from None


def export_interaction(query, response, verbosity, tone, now=None):
    """Serialize a question/answer pair for download.

    Returns:
        (filename, json_text) where filename embeds the epoch milliseconds.
    """
    if not response:
        raise ValueError("No response to process")

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    now = now.astimezone(timezone.utc)

    epoch_ms = int(now.timestamp() * 1000)
    timestamp = now.strftime('%Y-%m-%dT%H:%M:%S.') + f"{now.microsecond // 1000:03d}Z"

    payload = {
        "query": query,
        "response": response,
        "verbosity": verbosity,
        "tone": tone,
        "timestamp": timestamp,
    }
    filename = RESPONSE_FILENAME_PATTERN.format(epoch_ms=epoch_ms)
    logger.info(f"Exported assistant response as {filename}")
    return filename, json.dumps(payload, indent=2)
