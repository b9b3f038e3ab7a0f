ROLE_PROMPT = """\
You are an expert JavaScript Automation Engineer.
"""

IMAGE_TASK_PROMPT = """\
Analyze this screenshot of a grocery store coupon webpage.
Identify the "Clip", "Add", or "Load to Card" buttons.
"""

HTML_TASK_PROMPT = """\
Analyze this HTML snippet from a grocery store coupon webpage.
Identify the structural pattern for "Clip" buttons.
"""

RATE_LIMIT_PROMPT = """\
CRITICAL: The user reports being rate-limited/blocked by the site (must stay under 19 requests/minute).
Generate a robust, vanilla JavaScript snippet that:
1. Identifies ALL unclipped coupon buttons first.
2. Iterates through them sequentially using a 'for...of' loop with async/await.
3. Clicks one button.
4. WAITS for a delay between 3500ms and 4500ms (approx 4 seconds) to ensure the rate stays safely below 19 requests/minute.
5. Logs clear progress to the console (e.g., "Clipping 1 of 50... Do not close tab").
"""

AUTO_SCROLL_PROMPT = """\
IMPORTANT: The user has requested that the script MUST first scroll to the bottom of the page to load all lazy-loaded content.
Generate code that:
1. Scrolls to the bottom of the document.
2. Waits a short moment (e.g., 2 seconds) for new content.
3. Repeats this until the scroll height stops increasing or a reasonable limit is reached (at most 30 rounds).
4. ONLY THEN performs the identifying and clicking of the coupon buttons.
"""

IMAGE_SELECTOR_PROMPT = """\
Prioritize selectors that seem stable (e.g., specific classes, aria-labels, or text content matching).
Avoid clicking buttons that are already clipped (often labeled "Clipped" or styled differently).
"""

HTML_SELECTOR_PROMPT = """\
If classes look obfuscated (e.g., "css-12345"), prefer using text content matching (e.g., containing "Clip") or aria-labels to ensure longevity.
Avoid clicking buttons that are already clipped (often labeled "Clipped" or disabled).
"""

OUTPUT_PROMPT = """\
Return the response in JSON format with the fields script, explanation, confidence (High, Medium, or Low) and targetSelectors.
"""

HTML_CONTENT_PREFIX = "HTML Content: \n"

_TASKS = {
    "image": (IMAGE_TASK_PROMPT, IMAGE_SELECTOR_PROMPT),
    "html": (HTML_TASK_PROMPT, HTML_SELECTOR_PROMPT),
}


def build_prompt(kind, auto_scroll):
    """Assemble the instruction text for an "image" or "html" request."""
    if kind not in _TASKS:
        raise ValueError(f"Unknown payload kind: {kind}")
    task, selectors = _TASKS[kind]
    pieces = [ROLE_PROMPT, task, RATE_LIMIT_PROMPT]
    if auto_scroll:
        pieces.append(AUTO_SCROLL_PROMPT)
    pieces += [selectors, OUTPUT_PROMPT]
    return "\n".join(pieces)
