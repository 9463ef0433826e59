"""jinja2 templates for the compiled documents.

HTML shells are autoescaped. The CSS and script templates are not; values
reach them through the ``css`` filter (stylesheet) or ``tojson`` (script).
"""

from __future__ import annotations

from jinja2 import DictLoader, Environment, select_autoescape

from .styles import css_url, css_value, px

NOTIFICATION_DOCUMENT = """\
<!doctype html>
<html>
  <head>
    <meta charset="utf-8" />
    <title>{{ document_title }}</title>
    <style>
{{ styles|safe }}
    </style>
  </head>
  <body>
    {{ body }}
    <script>
{{ script|safe }}
    </script>
  </body>
</html>
"""

NOTIFICATION_CSS = """\
html,
body {
  font-family: system-ui;
  background: {{ colors.background|css }};
  color: {{ colors.text_color|css }};
  margin: 0;
  padding: 0;
  overflow: hidden;
}

.card {
  border: 1px solid {{ colors.border_color|css }};
  border-radius: 12px;
  padding: 16px;
  color: {{ colors.text_color|css }};
  width: {{ width|px }};
  min-height: {{ min_height|px }};
  background: {{ colors.card_background|css }};
{% if mode == "global" %}
  position: relative;
{% else %}
  display: flex;
  flex-direction: column;
  gap: 10px;
{% endif %}
  box-sizing: border-box;
}

button {
  padding: 10px 12px;
  border-radius: 10px;
  cursor: pointer;
  background: {{ colors.button_bg|css }};
  border: 1px solid {{ colors.button_border|css }};
  color: {{ colors.text_color|css }};
  user-select: none;
}
{% if mode == "global" %}

.card.grid-visible {
  background-image:
    repeating-linear-gradient(0deg, transparent, transparent 19px, rgba(102, 126, 234, 0.2) 19px, rgba(102, 126, 234, 0.2) 20px),
    repeating-linear-gradient(90deg, transparent, transparent 19px, rgba(102, 126, 234, 0.2) 19px, rgba(102, 126, 234, 0.2) 20px);
  background-size: {{ grid_size }}px {{ grid_size }}px;
}

.draggable-element {
  position: absolute;
  cursor: move;
  transition: box-shadow 0.2s;
  z-index: 1;
  user-select: none;
}

.draggable-element:hover {
  box-shadow: 0 2px 8px rgba(102, 126, 234, 0.3);
  outline: 2px dashed rgba(102, 126, 234, 0.4);
  outline-offset: 4px;
  z-index: 10;
}

.draggable-element.dragging {
  opacity: 0.8;
  box-shadow: 0 6px 16px rgba(102, 126, 234, 0.5);
  z-index: 100;
}
{% elif mode == "buttons" %}

.buttons-container {
  position: relative;
  min-height: 200px;
  flex: 1;
  background-image:
    repeating-linear-gradient(0deg, transparent, transparent 19px, rgba(102, 126, 234, 0.1) 19px, rgba(102, 126, 234, 0.1) 20px),
    repeating-linear-gradient(90deg, transparent, transparent 19px, rgba(102, 126, 234, 0.1) 19px, rgba(102, 126, 234, 0.1) 20px);
  background-size: {{ grid_size }}px {{ grid_size }}px;
}

.buttons-container.grid-visible {
  background-image:
    repeating-linear-gradient(0deg, transparent, transparent 19px, rgba(102, 126, 234, 0.2) 19px, rgba(102, 126, 234, 0.2) 20px),
    repeating-linear-gradient(90deg, transparent, transparent 19px, rgba(102, 126, 234, 0.2) 19px, rgba(102, 126, 234, 0.2) 20px);
}

button.draggable {
  cursor: move;
  transition: box-shadow 0.2s;
  z-index: 1;
}

button.draggable:hover {
  box-shadow: 0 2px 8px rgba(0, 0, 0, 0.2);
  z-index: 10;
}

button.draggable.dragging {
  opacity: 0.7;
  box-shadow: 0 4px 12px rgba(0, 0, 0, 0.3);
  z-index: 100;
}
{% else %}

.row {
  display: flex;
  gap: 10px;
  flex-wrap: wrap;
}
{% endif %}
{% if badge_shown %}

.badge {
  display: inline-flex;
  align-items: center;
  gap: 8px;
  padding: 6px 10px;
  border-radius: 999px;
  background: {{ colors.badge_bg|css }};
  font-size: 12px;
}

.dot {
  width: 10px;
  height: 10px;
  border-radius: 999px;
  background: {{ dot_active|css }};
}
{% endif %}

.title {
  margin: 0;
  color: {{ colors.text_color|css }};
}

.subtitle {
  margin: 0;
  font-size: 14px;
  color: {{ colors.subtitle_color|css }};
}
{% if show_debug %}

pre {
  background: {{ colors.debug_bg|css }};
  padding: 10px;
  border-radius: 10px;
  white-space: pre-wrap;
  font-size: 12px;
  overflow: auto;
  box-sizing: border-box;
  flex: none;
  max-height: 120px;
}
{% endif %}
"""

NOTIFICATION_JS = r"""
const out = {% if show_debug %}document.getElementById("out"){% else %}null{% endif %};
const headerEl = document.getElementById("header");
const subtitleEl = document.getElementById("subtitle");
{% if badge_shown %}
const counterEl = document.getElementById("counter");
const counterLabelEl = document.getElementById("counterLabel");
const dotEl = document.getElementById("dot");
{% endif %}

const state = {
  lang: {{ lang|tojson }},
  ticks: 0,
  payload: {{ payload|tojson }},
  i18n: {{ i18n|tojson }},
};

const BUTTONS = {{ buttons|tojson }};
const SAMPLE_PAYLOAD = {{ sample_payload|tojson }};
{% if badge_shown %}
const DOT_COLORS = { active: {{ dot_active|tojson }}, danger: {{ dot_danger|tojson }} };
const DANGER = { field: {{ danger_field|tojson }}, threshold: {{ danger_threshold|tojson }} };
{% endif %}

function log(msg) {
  if (out) {
    const next = (out.textContent ? out.textContent + "\n" : "") + msg;
    const lines = next.split("\n");
    out.textContent = lines.length > 120 ? lines.slice(lines.length - 120).join("\n") : next;
  }
  console.log(msg);
}

function mergeI18n(hostI18n) {
  if (!hostI18n || typeof hostI18n !== "object") return false;
  for (const [lang, dict] of Object.entries(hostI18n)) {
    if (!dict || typeof dict !== "object") continue;
    state.i18n[lang] = { ...(state.i18n[lang] || {}), ...dict };
  }
  return true;
}

const t = (key) => state.i18n[state.lang]?.[key] ?? state.i18n.en?.[key] ?? key;

const fmt = (str) => String(str).replace(/\{(\w+)\}/g, (_, k) => state.payload[k] ?? "");

async function safeCall(method, payload) {
  if (typeof window.jsBridgeCall !== "function") {
    log("jsBridgeCall not found, skipped " + method);
    return undefined;
  }
  try {
    const res = await window.jsBridgeCall(method, payload);
    log("-> " + method + " " + JSON.stringify(payload));
    log("<- " + JSON.stringify(res));
    return res;
  } catch (err) {
    log("bridge call " + method + " failed: " + err);
    return undefined;
  }
}

let measureScheduled = false;
let lastSizeKey = "";

function reportCardSize() {
  const card = document.querySelector(".card");
  if (!card) return;
  const width = card.offsetWidth;
  const height = card.offsetHeight;
  const key = width + "x" + height;
  if (key === lastSizeKey) return;
  lastSizeKey = key;
  safeCall("template:onSize", { width, height });
}

function requestMeasure() {
  if (measureScheduled) return;
  measureScheduled = true;
  setTimeout(() => {
    measureScheduled = false;
    reportCardSize();
  }, 0);
}

function render() {
  headerEl.textContent = fmt(t("title"));
  subtitleEl.textContent = fmt(t("subtitle"));
{% if badge_shown %}
  counterLabelEl.textContent = t("counter");
  dotEl.style.background =
    Number(state.payload[DANGER.field]) > DANGER.threshold ? DOT_COLORS.danger : DOT_COLORS.active;
{% endif %}
  const switchBtn = document.getElementById("switchLang");
  if (switchBtn) switchBtn.textContent = t("switch");
  log("render -> lang=" + state.lang + " payload=" + JSON.stringify(state.payload));
  requestMeasure();
}

setInterval(() => {
  state.ticks++;
{% if badge_shown %}
  counterEl.textContent = state.ticks;
  dotEl.style.opacity = state.ticks % 2 ? "0.5" : "1";
{% endif %}
}, {{ counter_interval }});

function switchLang() {
  const order = Object.keys(state.i18n);
  const idx = order.indexOf(state.lang);
  state.lang = order[(idx + 1) % order.length];
  render();
}

function applyPayload(p) {
  state.payload = { ...state.payload, ...(p || {}) };
  render();
}

BUTTONS.forEach((btn) => {
  const el = document.getElementById(btn.id);
  if (!el) return;
  el.addEventListener("click", () => {
    if (btn.id === "switchLang") return switchLang();
    if (btn.id === "applyPayload") return applyPayload(SAMPLE_PAYLOAD);
    safeCall("template:onAction", btn.action ? { action: btn.action, lang: state.lang } : { action: btn.id });
  });
});
{% if mode != "static" %}

// Drag state: { state: "idle" } or { state: "dragging", element, grabX, grabY }.
const GRID_SIZE = {{ grid_size }};
let snapToGrid = true;
let drag = { state: "idle" };

function snapValue(value) {
  return Math.round(value / GRID_SIZE) * GRID_SIZE;
}

function readPosition(el) {
  return { x: parseFloat(el.dataset.x) || 0, y: parseFloat(el.dataset.y) || 0 };
}

function placeElement(el, x, y) {
  el.style.left = x + "px";
  el.style.top = y + "px";
  el.dataset.x = x;
  el.dataset.y = y;
}

function postToParent(message) {
  if (window.parent !== window) window.parent.postMessage(message, "*");
}

function startDrag(el, e) {
  if (drag.state !== "idle") return;
  const rect = el.getBoundingClientRect();
  drag = { state: "dragging", element: el, grabX: e.clientX - rect.left, grabY: e.clientY - rect.top };
  el.classList.add("dragging");
  document.addEventListener("mousemove", onDragMove);
  document.addEventListener("mouseup", onDragEnd);
}

function finishDrag() {
  const el = drag.element;
  document.removeEventListener("mousemove", onDragMove);
  document.removeEventListener("mouseup", onDragEnd);
  el.classList.remove("dragging");
  drag = { state: "idle" };
  return el;
}

function toggleGrid(target) {
  snapToGrid = !snapToGrid;
  target.classList.toggle("grid-visible");
  log("Grid snap: " + (snapToGrid ? "ON" : "OFF"));
}
{% endif %}
{% if mode == "global" %}

const card = document.getElementById("mainCard");

function onDragMove(e) {
  if (drag.state !== "dragging") return;
  const cardRect = card.getBoundingClientRect();
  let x = e.clientX - cardRect.left - drag.grabX;
  let y = e.clientY - cardRect.top - drag.grabY;
  if (snapToGrid) {
    x = snapValue(x);
    y = snapValue(y);
  }
  const maxX = cardRect.width - drag.element.offsetWidth - {{ edge_padding * 2 }};
  const maxY = cardRect.height - drag.element.offsetHeight - {{ edge_padding * 2 }};
  x = Math.max({{ edge_padding }}, Math.min(x, maxX));
  y = Math.max({{ edge_padding }}, Math.min(y, maxY));
  placeElement(drag.element, x, y);
}

function onDragEnd() {
  if (drag.state !== "dragging") return;
  const el = finishDrag();
  log("Element " + el.id + " moved to: x=" + el.dataset.x + ", y=" + el.dataset.y);
  const buttons = {};
  const elements = {};
  document.querySelectorAll(".draggable-element").forEach((item) => {
    const pos = readPosition(item);
    if (item.tagName.toLowerCase() === "button") buttons[item.id] = pos;
    else elements[item.id] = pos;
  });
  postToParent({ type: "elementPositionsUpdate", positions: { buttons, elements } });
}

function initDragAndDrop() {
  const items = document.querySelectorAll(".draggable-element");
  if (items.length > 0) card.classList.add("grid-visible");
  document.addEventListener("keydown", (e) => {
    if (e.key.toLowerCase() === "g") toggleGrid(card);
  });
  items.forEach((item) => {
    item.addEventListener("mousedown", (e) => {
      e.preventDefault();
      e.stopPropagation();
      startDrag(item, e);
    });
  });
}
{% elif mode == "buttons" %}

const card = document.querySelector(".card");
const container = document.getElementById("buttonsContainer");
const CARD_PADDING = {{ card_padding }};

function onDragMove(e) {
  if (drag.state !== "dragging") return;
  const containerRect = container.getBoundingClientRect();
  const cardRect = card.getBoundingClientRect();
  let x = e.clientX - containerRect.left - drag.grabX;
  let y = e.clientY - containerRect.top - drag.grabY;
  if (snapToGrid) {
    x = snapValue(x);
    y = snapValue(y);
  }
  // Container coordinates of the card's padded box.
  const shiftX = containerRect.left - cardRect.left;
  const shiftY = containerRect.top - cardRect.top;
  const minX = CARD_PADDING - shiftX;
  const minY = CARD_PADDING - shiftY;
  const maxX = cardRect.width - CARD_PADDING - shiftX - drag.element.offsetWidth;
  const maxY = cardRect.height - CARD_PADDING - shiftY - drag.element.offsetHeight;
  x = Math.max(minX, Math.min(x, maxX));
  y = Math.max(minY, Math.min(y, maxY));
  placeElement(drag.element, x, y);
}

function onDragEnd() {
  if (drag.state !== "dragging") return;
  finishDrag();
  const positions = {};
  document.querySelectorAll("button.draggable").forEach((btn) => {
    positions[btn.id] = readPosition(btn);
  });
  postToParent({ type: "buttonPositionsUpdate", positions });
  log("Button positions updated: " + JSON.stringify(positions));
}

function initDragAndDrop() {
  const draggableButtons = document.querySelectorAll("button.draggable");
  if (draggableButtons.length === 0) return;
  container.classList.add("grid-visible");
  document.addEventListener("keydown", (e) => {
    if (e.key.toLowerCase() === "g") toggleGrid(container);
  });
  draggableButtons.forEach((btn) => {
    btn.addEventListener("mousedown", (e) => {
      e.preventDefault();
      startDrag(btn, e);
    });
  });
}
{% endif %}

window.addEventListener("load", () => {
  safeCall("template:onReady", { lang: state.lang, ts: Date.now() });
  render();
  window.addEventListener("resize", requestMeasure);
{% if mode != "static" %}
  initDragAndDrop();
{% endif %}
});

function receive(msg) {
  log("<- host: " + JSON.stringify(msg));
  if (!msg || typeof msg !== "object") return;
  if (msg.type === "init") {
    if (mergeI18n(msg.i18n)) log("i18n merged from host");
    if (msg.lang) state.lang = msg.lang;
    if (msg.payload) state.payload = { ...state.payload, ...msg.payload };
    render();
    return;
  }
  if (msg.type === "setI18n") {
    if (mergeI18n(msg.i18n)) {
      log("i18n updated from host");
      render();
    }
    return;
  }
  if (msg.type === "setLang") {
    if (msg.lang) state.lang = msg.lang;
    render();
    return;
  }
  if (msg.type === "update") {
    applyPayload(msg.payload);
  }
}

window.receive = receive;
window.__fromHost = receive;
"""

CHAT_DOCUMENT = """\
<!doctype html>
<html>
  <head>
    <meta charset="utf-8" />
    <title>{{ document_title }}</title>
    <style>
{{ styles|safe }}
    </style>
  </head>
  <body>
    {{ body }}
    <script>
{{ script|safe }}
    </script>
  </body>
</html>
"""

CHAT_CSS = """\
* { box-sizing: border-box; }
html, body { margin: 0; padding: 0; overflow: hidden; background: transparent; }
body { font-family: 'Roboto', system-ui, -apple-system, sans-serif; -webkit-font-smoothing: antialiased; }
.chat-dialog { width: {{ width|px }};{% if not bg_image %} background: {{ content_bg|css }};{% endif %} border: 1px solid #ccc; box-shadow: 0 2px 10px rgba(0,0,0,0.1); display: flex; flex-direction: column; }
.header { display: flex; align-items: center; justify-content: space-between; padding: 10px 15px; background: {{ header_bg|css }}; }
.header-text { font-family: 'Roboto', sans-serif; font-weight: 400; font-size: 14px; color: rgba(255,255,255,0.8); margin: 0; }
.close-button { width: 16px; height: 16px; cursor: pointer; background: transparent; border: none; padding: 0; display: flex; align-items: center; justify-content: center; flex-shrink: 0; color: rgba(255,255,255,0.9); }
.close-button svg { display: block; width: 100%; height: 100%; }
.close-button:hover { opacity: 0.8; }
{% if bg_image %}
.content { display: flex; flex-direction: column; align-items: flex-start; padding: {{ content_padding }}; gap: {{ block_gap|px }}; background-image: {{ bg_image|cssurl }}; background-size: cover; background-repeat: no-repeat; background-position: center; }
{% else %}
.content { display: flex; flex-direction: column; align-items: flex-start; padding: {{ content_padding }}; gap: {{ block_gap|px }}; background-color: {{ content_bg|css }}; }
{% endif %}
.main-title { font-family: 'Roboto', sans-serif; font-weight: 500; font-size: 25px; line-height: 1.3; color: rgba(0,0,0,0.8); margin: 0; }
.description { font-family: 'Roboto', sans-serif; font-weight: 400; font-size: 16px; line-height: 1.4; color: black; margin: 0; }
.chat-link-wrapper { align-self: center; margin-top: 8px; }
.chat-link { font-family: 'Roboto', sans-serif; font-weight: 500; font-size: 23px; color: #0111e0; text-decoration: underline; cursor: pointer; background: transparent; border: none; padding: 0; }
.chat-link:hover { opacity: 0.8; }
.checkbox-container { display: flex; align-items: center; gap: 8px; margin-top: 10px; }
.checkbox { width: 15px; height: 15px; cursor: pointer; flex-shrink: 0; }
.checkbox-label { font-family: 'Roboto', sans-serif; font-weight: 400; font-size: 13px; color: black; cursor: pointer; user-select: none; margin: 0; }
.custom-element { width: 100%; }
.custom-button { border: none; cursor: pointer; font-weight: 500; font-family: 'Roboto', sans-serif; }
.custom-button:hover { opacity: 0.9; }
.custom-text { line-height: 1.5; margin: 0; font-family: 'Roboto', sans-serif; }
.custom-title { font-weight: 600; line-height: 1.3; margin: 0; font-family: 'Roboto', sans-serif; }
.custom-checkbox { display: flex; align-items: center; gap: 8px; }
.custom-checkbox input { width: 16px; height: 16px; cursor: pointer; }
.custom-checkbox label { cursor: pointer; user-select: none; }
.custom-image { display: flex; justify-content: center; }
.custom-image svg { max-width: 100%; height: auto; }
"""

CHAT_JS = """
async function safeCall(method, payload) {
  if (typeof window.jsBridgeCall !== "function") {
    console.log("jsBridgeCall not found, skipped " + method);
    return undefined;
  }
  try {
    return await window.jsBridgeCall(method, payload);
  } catch (err) {
    console.log("bridge call " + method + " failed: " + err);
    return undefined;
  }
}

window.addEventListener("load", () => {
  safeCall("template:onReady", { type: {{ template_type|tojson }}, ts: Date.now() });
  const dialog = document.querySelector(".chat-dialog");
  if (dialog) {
    setTimeout(() => safeCall("template:onSize", { width: dialog.offsetWidth, height: dialog.offsetHeight }), {{ size_report_delay }});
  }
});

const closeBtn = document.getElementById("closeButton");
if (closeBtn) closeBtn.addEventListener("click", () => safeCall("template:onAction", { action: "close_webview" }));

const chatBtn = document.getElementById("chatButton");
if (chatBtn) {
  chatBtn.addEventListener("click", () => {
    const cb = document.getElementById("doNotShowAgain");
    safeCall("template:onAction", { action: "chat_now", doNotShowAgain: cb ? cb.checked : false });
  });
}

const checkbox = document.getElementById("doNotShowAgain");
if (checkbox) {
  checkbox.addEventListener("change", (e) => safeCall("template:onAction", { action: "checkbox_changed", checked: e.target.checked }));
}
"""

PREVIEW_HOST = """\
<!doctype html>
<html>
  <head>
    <meta charset="utf-8" />
    <title>{{ document_title }}</title>
    <style>
      html, body { margin: 0; height: 100%; background: {{ backdrop|css }}; }
      iframe { border: 0; width: 100%; height: 100%; }
    </style>
  </head>
  <body>
    <iframe id="card" srcdoc="{{ html }}"></iframe>
  </body>
</html>
"""

TEMPLATES = {
    "notification.html": NOTIFICATION_DOCUMENT,
    "notification.css.j2": NOTIFICATION_CSS,
    "notification.js.j2": NOTIFICATION_JS,
    "chat.html": CHAT_DOCUMENT,
    "chat.css.j2": CHAT_CSS,
    "chat.js.j2": CHAT_JS,
    "preview.html": PREVIEW_HOST,
}


def _jinja_env() -> Environment:
    env = Environment(
        loader=DictLoader(TEMPLATES),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["css"] = css_value
    env.filters["cssurl"] = css_url
    env.filters["px"] = px
    # i18n and payload key order is meaningful (language cycling order).
    env.policies["json.dumps_kwargs"] = {"sort_keys": False}
    return env


ENV = _jinja_env()


def render_template(name: str, **context: object) -> str:
    return ENV.get_template(name).render(**context)
