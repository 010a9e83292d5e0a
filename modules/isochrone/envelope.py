from typing import Any, Dict, Sequence


def build_envelope(payload: Dict[str, Any], took_s: float, copyrights: Sequence[str]) -> Dict[str, Any]:
    """
    Attach the `info` block (attribution and elapsed milliseconds) to a result payload.
    """
    body = dict(payload)
    body["info"] = {
        "copyrights": list(copyrights),
        "took": int(round(took_s * 1000)),
    }
    return body
