"""
Rebalancing commentary — sends a drift analysis and the goals it serves to
Perplexity and returns a short plain-language explanation of the plan.
"""

import logging
import os

from openai import OpenAI

LOGGER = logging.getLogger(__name__)

COMMENTARY_PROMPT = """\
You are a patient financial coach writing for an individual investor who is \
saving toward personal goals. Explain the rebalancing situation below in \
**Markdown**, in plain language, without jargon.

Structure (use these exact headers):

### Where You Stand
One short paragraph: how far the portfolio has drifted from its target mix \
and which asset classes moved the most. Reference the actual percentages.

### What The Plan Does
One paragraph describing the suggested trades and why they bring the mix \
back in line. If no trades are needed, say so and explain why that is good.

### How It Serves Your Goals
One paragraph connecting the target mix to the goals listed, especially \
those with near target dates.

Write conversationally. Total ~150-200 words.

Data:
"""


def build_prompt_data(plan: dict, goals: list[dict]) -> str:
    """Compact text summary of the plan and goals for the prompt."""
    analysis = plan["analysis"]
    lines = [
        f"Total portfolio value: ${analysis['total_value']:,.2f}",
        f"Drift threshold: {analysis['drift_threshold']:g}%",
        f"Overall drift: {analysis['overall_drift']:.1f}% (risk level {analysis['risk_level']})\n",
        "### Allocation (current vs target)",
    ]
    for a in analysis["assets"]:
        lines.append(
            f"- {a['asset']}: {a['current']:.1f}% vs {a['target']:.1f}% "
            f"({a['direction']}, severity {a['severity']})"
        )

    lines.append("\n### Suggested Trades")
    if plan["transactions"]:
        for t in plan["transactions"]:
            lines.append(f"- {t['action']} ${t['amount']:,.0f} of {t['asset']} ({t['priority']} priority)")
    else:
        lines.append("- none")

    lines.append("\n### Goals")
    for g in goals[:10]:
        lines.append(
            f"- {g['name']} ({g['category']}): ${g['current_amount']:,.0f} of "
            f"${g['target_amount']:,.0f} by {g['target_date']}"
        )
    return "\n".join(lines)


def generate_commentary(plan: dict, goals: list[dict]) -> str:
    """
    Call Perplexity to explain a rebalancing plan.

    Returns:
        Markdown-formatted commentary string
    """
    api_key = os.environ.get("PERPLEXITY_API_KEY", "")
    if not api_key or api_key.startswith("pplx-your"):
        return "**API key not configured.** Set PERPLEXITY_API_KEY in your .env file."

    prompt = COMMENTARY_PROMPT + build_prompt_data(plan, goals)

    client = OpenAI(
        api_key=api_key,
        base_url="https://api.perplexity.ai",
    )

    try:
        response = client.chat.completions.create(
            model=os.environ.get("PERPLEXITY_MODEL", "sonar"),
            messages=[
                {
                    "role": "system",
                    "content": "You are a financial coach. Return well-formatted Markdown. No JSON.",
                },
                {"role": "user", "content": prompt},
            ],
            temperature=0.3,
        )
        return response.choices[0].message.content
    except Exception as e:
        LOGGER.warning("Commentary request failed: %s", e)
        return f"**Commentary failed:** {e}"
