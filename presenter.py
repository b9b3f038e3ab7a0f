from models import Loading, Populated

COPY_ACK_SECONDS = 2.0
COPY_LABEL = "Copy Code"
COPIED_LABEL = "Copied!"
IDLE_TEXT = "Upload a screenshot or paste HTML to generate your automation script."
LOADING_TEXT = "Analyzing DOM structure..."


def confidence_tier(confidence):
    return "high" if confidence == "High" else "other"


def present(state):
    """View model for the result panel. Failed renders like idle; the error sits with the inputs."""
    if isinstance(state, Loading):
        return {"state": "loading", "message": LOADING_TEXT}
    if isinstance(state, Populated):
        result = state.result
        return {
            "state": "populated",
            "script": result.script,
            "explanation": result.explanation,
            "confidence": result.confidence,
            "confidence_tier": confidence_tier(result.confidence),
            "selectors": list(result.target_selectors),
        }
    return {"state": "idle", "message": IDLE_TEXT}

