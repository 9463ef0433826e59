"""Host side of the card bridge.

Outbound calls (card -> host) arrive through ``window.jsBridgeCall`` as
``template:onReady``, ``template:onSize`` and ``template:onAction``. Inbound
messages (host -> card) are plain objects handed to ``window.receive``.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional

from .templates import render_template

log = logging.getLogger(__name__)

ON_READY = "template:onReady"
ON_SIZE = "template:onSize"
ON_ACTION = "template:onAction"
OUTBOUND_METHODS = (ON_READY, ON_SIZE, ON_ACTION)

RECEIVE_FUNCTION = "receive"


def init_message(
    lang: Optional[str] = None,
    i18n: Optional[Mapping[str, Mapping[str, str]]] = None,
    payload: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    msg: Dict[str, Any] = {"type": "init"}
    if lang:
        msg["lang"] = lang
    if i18n:
        msg["i18n"] = {code: dict(table) for code, table in i18n.items()}
    if payload:
        msg["payload"] = dict(payload)
    return msg


def set_i18n_message(i18n: Mapping[str, Mapping[str, str]]) -> Dict[str, Any]:
    return {"type": "setI18n", "i18n": {code: dict(table) for code, table in i18n.items()}}


def set_lang_message(lang: str) -> Dict[str, Any]:
    return {"type": "setLang", "lang": lang}


def update_message(payload: Mapping[str, Any]) -> Dict[str, Any]:
    return {"type": "update", "payload": dict(payload)}


def receive_call(message: Mapping[str, Any], target: str = "window") -> str:
    """JavaScript statement that delivers ``message`` to a loaded card.

    ``target`` is the card's window expression, e.g. an iframe's
    ``contentWindow`` when the card is embedded.
    """
    body = json.dumps(message, ensure_ascii=False)
    # Keep the literal safe inside inline <script> and for U+2028/2029.
    body = body.replace("</", "<\\/").replace("\u2028", "\\u2028").replace("\u2029", "\\u2029")
    return f"{target}.{RECEIVE_FUNCTION}({body});"


def parse_bridge_call(method: str, payload: Any) -> Dict[str, Any]:
    """Normalize an outbound call for logging and the editor's event list.

    Unknown methods are returned with ``known`` set to False instead of raising.
    """
    data = payload if isinstance(payload, Mapping) else {}
    return {
        "method": method,
        "known": method in OUTBOUND_METHODS,
        "action": data.get("action") if method == ON_ACTION else None,
        "payload": dict(data),
    }


# -- preview host ----------------------------------------------------------

CARD_FRAME = 'document.getElementById("card").contentWindow'
CONSOLE_PREFIX = "__cardbridge__"

# Injected into every frame at document creation. Inside the card frame it
# stands in for the native bridge; in the host page it relays the editor
# messages the card posts to its parent.
PREVIEW_SHIM = """
(function () {
  const emit = (kind, data) => console.log("%(prefix)s" + JSON.stringify({ kind: kind, data: data }));
  if (window.parent !== window) {
    window.jsBridgeCall = (method, payload) => {
      emit("call", { method: method, payload: payload });
      return Promise.resolve({ ok: true });
    };
  } else {
    window.addEventListener("message", (e) => emit("message", e.data));
  }
})();
""" % {"prefix": CONSOLE_PREFIX}


def preview_document(card_html: str, backdrop: str = "#e5e7eb") -> str:
    """Wrap a compiled card in a host page that embeds it as an iframe."""
    return render_template("preview.html", document_title="Preview", html=card_html, backdrop=backdrop)


def parse_console_message(text: str) -> Optional[Dict[str, Any]]:
    """Decode a line logged by :data:`PREVIEW_SHIM`; other console output gives ``None``."""
    if not text.startswith(CONSOLE_PREFIX):
        return None
    try:
        data = json.loads(text[len(CONSOLE_PREFIX):])
    except json.JSONDecodeError:
        log.warning("Undecodable bridge console line: %r", text[:200])
        return None
    if not isinstance(data, dict) or data.get("kind") not in ("call", "message"):
        return None
    return data
