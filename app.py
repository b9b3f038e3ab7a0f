import json
import logging

from flask import Flask, abort, jsonify, request

from config import Settings
from controller import SessionStore, size_limit_message
from gemini_service import ScriptGenerator, make_client
from log_setup import setup_logging
from models import GenerationError, HookNotRegistered, ValidationError
from playground import HookRegistry
from presenter import COPIED_LABEL, COPY_ACK_SECONDS, COPY_LABEL

logger = logging.getLogger(__name__)


def create_app(settings=None, generator=None):
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level)

    if generator is None:
        if not settings.api_key:
            raise RuntimeError("GEMINI_API_KEY is not set")
        generator = ScriptGenerator(
            make_client(settings.api_key, settings.timeout_ms),
            model=settings.model,
            html_char_limit=settings.html_char_limit,
        )

    hooks = HookRegistry()
    sessions = SessionStore(
        generator,
        hooks,
        max_sessions=settings.max_sessions,
        max_image_bytes=settings.max_image_bytes,
    )

    app = Flask(__name__)
    # Hard cap on request bodies; the precise image ceiling is checked per upload.
    app.config["MAX_CONTENT_LENGTH"] = settings.max_image_bytes * 2
    app.config["HOST"] = settings.host
    app.config["PORT"] = settings.port
    app.config["DEBUG"] = settings.debug
    app.extensions["autoclip.sessions"] = sessions
    app.extensions["autoclip.hooks"] = hooks

    def get_view(view_id):
        try:
            return sessions.get(view_id)
        except KeyError:
            abort(404)

    def run_action(controller, action, *args):
        try:
            action(*args)
        except ValidationError as e:
            return jsonify({"error": str(e), "state": controller.snapshot()}), 400
        except GenerationError:
            return jsonify({"error": controller.error, "state": controller.snapshot()}), 502
        return jsonify({"state": controller.snapshot()})

    @app.errorhandler(404)
    def not_found(_e):
        return jsonify({"error": "Unknown page view. Reload the page."}), 404

    @app.errorhandler(413)
    def too_large(_e):
        return jsonify({"error": size_limit_message(settings.max_image_bytes)}), 413

    @app.route("/")
    def index():
        view = sessions.open()
        return PAGE.replace(
            "/*__VIEW_ID__*/", json.dumps(view.view_id),
        ).replace(
            "/*__COPY_ACK_MS__*/", str(int(COPY_ACK_SECONDS * 1000)),
        ).replace(
            "/*__COPY_LABEL__*/", json.dumps(COPY_LABEL),
        ).replace(
            "/*__COPIED_LABEL__*/", json.dumps(COPIED_LABEL),
        ).replace(
            "__MODEL__", settings.model,
        )

    @app.route("/api/<view_id>/state")
    def state(view_id):
        return jsonify({"state": get_view(view_id).controller.snapshot()})

    @app.route("/api/<view_id>/mode", methods=["POST"])
    def select_mode(view_id):
        controller = get_view(view_id).controller
        data = request.get_json(silent=True) or {}
        try:
            controller.select_mode(data.get("mode", ""))
        except ValueError:
            return jsonify({"error": f"Unknown mode: {data.get('mode')}"}), 400
        return jsonify({"state": controller.snapshot()})

    @app.route("/api/<view_id>/auto-scroll", methods=["POST"])
    def auto_scroll(view_id):
        controller = get_view(view_id).controller
        data = request.get_json(silent=True) or {}
        if "enabled" in data:
            controller.set_auto_scroll(data["enabled"])
        else:
            controller.toggle_auto_scroll()
        return jsonify({"state": controller.snapshot()})

    @app.route("/api/<view_id>/image", methods=["POST"])
    def upload_image(view_id):
        controller = get_view(view_id).controller
        upload = request.files.get("file")
        if upload is None or not upload.filename:
            return jsonify({"error": "No image provided", "state": controller.snapshot()}), 400
        return run_action(controller, controller.upload_image,
                          upload.filename, upload.read(), upload.mimetype)

    @app.route("/api/<view_id>/image", methods=["DELETE"])
    def clear_image(view_id):
        controller = get_view(view_id).controller
        controller.clear_image()
        return jsonify({"state": controller.snapshot()})

    @app.route("/api/<view_id>/regenerate", methods=["POST"])
    def regenerate(view_id):
        controller = get_view(view_id).controller
        return run_action(controller, controller.regenerate)

    @app.route("/api/<view_id>/html", methods=["POST"])
    def submit_html(view_id):
        controller = get_view(view_id).controller
        data = request.get_json(silent=True) or {}
        return run_action(controller, controller.submit_html, data.get("html", ""))

    @app.route("/api/<view_id>/playground")
    def playground(view_id):
        return jsonify(get_view(view_id).playground.to_dict())

    @app.route("/api/<view_id>/playground/clip/<int:coupon_id>", methods=["POST"])
    def clip_coupon(view_id, coupon_id):
        view = get_view(view_id)
        try:
            view.playground.clip(coupon_id)
        except KeyError:
            return jsonify({"error": f"Unknown coupon: {coupon_id}"}), 404
        return jsonify(view.playground.to_dict())

    @app.route("/api/<view_id>/playground/reset", methods=["POST"])
    def reset_coupons(view_id):
        view = get_view(view_id)
        view.playground.reset_all()
        return jsonify(view.playground.to_dict())

    @app.route("/api/<view_id>/playground/clip-all", methods=["POST"])
    def clip_all(view_id):
        try:
            count = hooks.invoke(view_id)
        except HookNotRegistered:
            return jsonify({"error": "Playground is not mounted"}), 409
        data = get_view(view_id).playground.to_dict()
        data["clipped"] = count
        return jsonify(data)

    @app.route("/api/<view_id>/playground/mount", methods=["POST"])
    def mount_playground(view_id):
        view = get_view(view_id)
        hooks.register(view_id, view.playground)
        return jsonify(view.playground.to_dict())

    @app.route("/api/<view_id>/playground/unmount", methods=["POST"])
    def unmount_playground(view_id):
        hooks.deregister(view_id)
        return "", 204

    @app.route("/api/<view_id>/close", methods=["POST"])
    def close_view(view_id):
        sessions.close(view_id)
        return "", 204

    return app


PAGE = r"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>AutoClip AI</title>
<style>
  *, *::before, *::after { box-sizing: border-box; margin: 0; padding: 0; }

  body {
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
    background: #0f0f0f;
    color: #e0e0e0;
  }

  nav {
    display: flex;
    justify-content: space-between;
    align-items: center;
    padding: 14px 28px;
    border-bottom: 1px solid #1e1e1e;
  }
  nav .brand { font-weight: 700; font-size: 1.1rem; color: #fff; }
  nav .model { font-size: 0.78rem; color: #888; display: flex; align-items: center; gap: 6px; }
  nav .dot { width: 8px; height: 8px; border-radius: 50%; background: #4ade80; }

  main {
    display: grid;
    grid-template-columns: 7fr 5fr;
    gap: 24px;
    padding: 24px 28px;
    max-width: 1280px;
    margin: 0 auto;
  }
  @media (max-width: 900px) { main { grid-template-columns: 1fr; } }

  .column { display: flex; flex-direction: column; gap: 20px; }

  .card {
    background: #1a1a1a;
    border: 1px solid #2a2a2a;
    border-radius: 10px;
    overflow: hidden;
  }
  .card-body { padding: 20px; }

  .hero { padding: 24px; background: #1e1633; border-color: #3b2a66; }
  .hero h1 { font-size: 1.3rem; color: #fff; margin-bottom: 8px; }
  .hero p { font-size: 0.85rem; color: #c4b5fd; line-height: 1.5; }

  .tabs { display: flex; border-bottom: 1px solid #2a2a2a; }
  .tab {
    flex: 1;
    background: transparent;
    color: #888;
    border-radius: 0;
    padding: 14px;
    box-shadow: none;
    border-bottom: 2px solid transparent;
  }
  .tab:hover { background: #202020; }
  .tab.active { color: #a78bfa; border-bottom-color: #8b5cf6; background: #1e1633; }

  .option {
    display: flex;
    justify-content: space-between;
    align-items: center;
    background: #141414;
    border: 1px solid #2a2a2a;
    border-radius: 8px;
    padding: 10px 12px;
    margin-bottom: 16px;
    font-size: 0.85rem;
  }
  .option label { display: flex; gap: 8px; align-items: center; cursor: pointer; }
  .option .hint { font-size: 0.72rem; color: #666; }

  .dropzone {
    position: relative;
    border: 2px dashed #333;
    border-radius: 10px;
    padding: 32px;
    text-align: center;
    color: #888;
    font-size: 0.85rem;
  }
  .dropzone:hover { border-color: #8b5cf6; }
  .dropzone input { position: absolute; inset: 0; opacity: 0; cursor: pointer; }
  .preview { position: relative; text-align: center; }
  .preview img { max-width: 100%; max-height: 260px; border-radius: 6px; }
  .preview .close {
    position: absolute; top: 6px; right: 6px;
    padding: 2px 9px; background: rgba(0,0,0,0.6); box-shadow: none;
  }
  .preview .regen { margin-top: 12px; }
  .tip { margin-top: 12px; font-size: 0.75rem; color: #777; }

  textarea {
    width: 100%;
    min-height: 240px;
    background: #141414;
    color: #e0e0e0;
    border: 1px solid #2a2a2a;
    border-radius: 10px;
    padding: 14px;
    font-size: 0.78rem;
    font-family: ui-monospace, SFMono-Regular, Menlo, monospace;
    resize: vertical;
    outline: none;
    margin-bottom: 12px;
  }
  textarea:focus { border-color: #8b5cf6; }

  button {
    background: #8b5cf6;
    color: #fff;
    border: none;
    border-radius: 8px;
    padding: 8px 20px;
    font-size: 0.82rem;
    font-weight: 500;
    cursor: pointer;
    transition: background 0.2s, opacity 0.2s;
  }
  button:hover { background: #7c3aed; }
  button:disabled { opacity: 0.5; cursor: not-allowed; }
  .wide { width: 100%; }

  .error {
    margin-top: 14px;
    border: 1px solid #ef4444;
    background: #1a1111;
    color: #fca5a5;
    border-radius: 8px;
    padding: 10px 12px;
    font-size: 0.85rem;
  }
  .hidden { display: none !important; }

  .howto ol { padding-left: 20px; font-size: 0.85rem; color: #aaa; line-height: 1.9; }
  kbd { background: #232323; border: 1px solid #333; border-radius: 4px; padding: 1px 6px; font-size: 0.75rem; }

  .result { height: 420px; display: flex; flex-direction: column; }
  .result-empty, .result-loading {
    flex: 1;
    display: flex;
    flex-direction: column;
    align-items: center;
    justify-content: center;
    gap: 12px;
    color: #666;
    font-size: 0.85rem;
    text-align: center;
    padding: 24px;
  }
  .result-loading { color: #a78bfa; font-family: ui-monospace, monospace; }
  .spinner {
    width: 32px; height: 32px;
    border: 3px solid #333;
    border-top-color: #8b5cf6;
    border-radius: 50%;
    animation: spin 0.8s linear infinite;
  }
  @keyframes spin { to { transform: rotate(360deg); } }

  .result-header {
    display: flex; justify-content: space-between; align-items: center;
    padding: 10px 14px; border-bottom: 1px solid #2a2a2a; background: #141414;
    font-family: ui-monospace, monospace; font-size: 0.75rem; color: #888;
  }
  .copy-btn { background: #232323; color: #aaa; border: 1px solid #333; padding: 4px 12px; font-size: 0.72rem; }
  .copy-btn.copied { color: #4ade80; border-color: #166534; }
  .result-code {
    flex: 1; overflow-y: auto; padding: 14px;
    font-family: ui-monospace, monospace; font-size: 0.78rem; color: #c4b5fd;
    white-space: pre-wrap; word-break: break-all;
  }
  .result-info { border-top: 1px solid #2a2a2a; padding: 12px 14px; font-size: 0.75rem; background: #111; }
  .result-info .row { display: flex; justify-content: space-between; margin-bottom: 6px; }
  .result-info .label { color: #666; text-transform: uppercase; letter-spacing: 0.5px; font-weight: 600; }
  .badge { padding: 2px 8px; border-radius: 999px; font-size: 0.65rem; font-weight: 700; text-transform: uppercase; }
  .badge-high { background: #1e3a2f; color: #4ade80; }
  .badge-other { background: #3a321e; color: #facc15; }
  .explanation { color: #aaa; line-height: 1.5; }
  .selectors { display: flex; flex-wrap: wrap; gap: 6px; margin-top: 8px; }
  .selector { background: #232323; color: #a78bfa; padding: 2px 8px; border-radius: 4px; font-family: ui-monospace, monospace; }

  .playground { height: 420px; display: flex; flex-direction: column; }
  .playground-head { display: flex; justify-content: space-between; align-items: center; padding: 14px 18px; }
  .playground-head h3 { font-size: 0.95rem; color: #fff; }
  .link { background: none; color: #a78bfa; text-decoration: underline; padding: 0; box-shadow: none; }
  .link:hover { background: none; color: #c4b5fd; }
  .grid-wrap { position: relative; flex: 1; overflow-y: auto; padding: 0 18px 14px; }
  .grid { display: grid; grid-template-columns: repeat(3, 1fr); gap: 10px; }
  .coupon { background: #141414; border: 1px solid #2a2a2a; border-radius: 8px; padding: 8px; }
  .coupon.clipped { border-color: #22c55e; }
  .coupon img { width: 100%; height: 70px; object-fit: cover; border-radius: 4px; margin-bottom: 6px; }
  .coupon h4 { font-size: 0.75rem; white-space: nowrap; overflow: hidden; text-overflow: ellipsis; }
  .coupon p { font-size: 0.75rem; color: #4ade80; font-weight: 700; margin: 2px 0 6px; }
  .coupon button { width: 100%; padding: 5px; font-size: 0.7rem; }
  .coupon.clipped button { background: #232323; color: #666; cursor: default; }
  .notice {
    position: sticky; top: 0; z-index: 1;
    margin: 0 auto 8px; width: fit-content;
    background: #16a34a; color: #fff; border-radius: 999px; padding: 5px 14px; font-size: 0.78rem;
  }
  .playground-foot { font-size: 0.7rem; color: #555; text-align: center; padding: 8px 18px 12px; }
</style>
</head>
<body>

<nav>
  <span class="brand">AutoClip AI</span>
  <span class="model"><span class="dot"></span>__MODEL__ active</span>
</nav>

<main>
  <div class="column">
    <div class="card hero">
      <h1>Automate your grocery savings</h1>
      <p>Don't click 100 times. Upload a screenshot of your store's coupon page or paste the HTML source.
         The model detects the buttons and writes a custom "Select All" script for you.</p>
    </div>

    <div class="card">
      <div class="tabs">
        <button id="tabScreenshot" class="tab active" onclick="selectMode('SCREENSHOT')">From Screenshot</button>
        <button id="tabHtml" class="tab" onclick="selectMode('HTML')">From HTML</button>
      </div>
      <div class="card-body">
        <div class="option">
          <label><input id="autoScroll" type="checkbox" onchange="setAutoScroll(this.checked)"> Include auto-scrolling logic</label>
          <span class="hint">For lazy-loading pages</span>
        </div>

        <div id="screenshotPane">
          <div id="dropzone" class="dropzone">
            <p><strong>Click to upload screenshot</strong></p>
            <p>PNG, JPG up to 4MB</p>
            <input id="fileInput" type="file" accept="image/*">
          </div>
          <div id="preview" class="preview hidden">
            <img id="previewImg" alt="Preview">
            <button class="close" onclick="clearImage()">&times;</button>
            <div><button id="regenBtn" class="regen" onclick="regenerate()">Regenerate Script</button></div>
          </div>
          <p id="tip" class="tip">Tip: Take a screenshot that clearly shows both an "Unclipped" button and a "Clipped" button for best accuracy.</p>
        </div>

        <div id="htmlPane" class="hidden">
          <textarea id="htmlInput" placeholder="Right click the coupon grid -> Inspect -> Copy Outer HTML -> Paste here..."></textarea>
          <button id="htmlBtn" class="wide" onclick="submitHtml()">Generate Script</button>
        </div>

        <div id="error" class="error hidden"></div>
      </div>
    </div>

    <div class="card howto">
      <div class="card-body">
        <h3 style="margin-bottom:10px">How to use</h3>
        <ol>
          <li>Copy the generated code from the black box.</li>
          <li>Go to your grocery store's coupon page in your browser.</li>
          <li>Press <kbd>F12</kbd> (Windows) or <kbd>Cmd+Opt+J</kbd> (Mac) to open Developer Tools.</li>
          <li>Paste the code into the "Console" tab and hit Enter. Watch them clip!</li>
        </ol>
      </div>
    </div>
  </div>

  <div class="column">
    <div id="result" class="card result"></div>

    <div class="card playground">
      <div class="playground-head">
        <h3>Test Playground</h3>
        <button class="link" onclick="resetCoupons()">Reset All</button>
      </div>
      <div class="grid-wrap">
        <div id="notice" class="notice hidden"></div>
        <div id="grid" class="grid"></div>
      </div>
      <div class="playground-foot">
        This is a simulation. Run <code>demoClipAll()</code> in the console, or upload a screenshot of this block to test a generated script.
      </div>
    </div>
  </div>
</main>

<script>
  const VIEW_ID = /*__VIEW_ID__*/;
  const COPY_ACK_MS = /*__COPY_ACK_MS__*/;
  const COPY_LABEL = /*__COPY_LABEL__*/;
  const COPIED_LABEL = /*__COPIED_LABEL__*/;
  const LOADING_VIEW = { state: 'loading', message: 'Analyzing DOM structure...' };

  const el = id => document.getElementById(id);
  let busy = false;

  // ── API call helper ──
  async function callApi(path, options = {}) {
    const res = await fetch('/api/' + VIEW_ID + path, options);
    const data = res.status === 204 ? {} : await res.json();
    if (data.state) renderState(data.state);
    if (!res.ok) {
      const err = new Error(data.error || 'HTTP ' + res.status);
      err.status = res.status;
      throw err;
    }
    return data;
  }

  function postJson(path, body) {
    return callApi(path, {
      method: 'POST',
      headers: { 'Content-Type': 'application/json' },
      body: JSON.stringify(body || {}),
    });
  }

  // ═══════════════════════════════════
  // Inputs
  // ═══════════════════════════════════
  function showError(message) {
    el('error').textContent = message || '';
    el('error').classList.toggle('hidden', !message);
  }

  function setBusy(value) {
    busy = value;
    el('regenBtn').disabled = value;
    el('regenBtn').textContent = value ? 'Analyzing...' : 'Regenerate Script';
    el('htmlBtn').disabled = value;
    el('htmlBtn').textContent = value ? 'Analyzing...' : 'Generate Script';
  }

  function renderState(s) {
    const screenshot = s.mode === 'SCREENSHOT';
    el('tabScreenshot').classList.toggle('active', screenshot);
    el('tabHtml').classList.toggle('active', !screenshot);
    el('screenshotPane').classList.toggle('hidden', !screenshot);
    el('htmlPane').classList.toggle('hidden', screenshot);
    el('autoScroll').checked = s.auto_scroll;

    el('dropzone').classList.toggle('hidden', !!s.image_preview);
    el('preview').classList.toggle('hidden', !s.image_preview);
    el('tip').classList.toggle('hidden', !!s.image_preview);
    if (s.image_preview) el('previewImg').src = s.image_preview;
    else el('fileInput').value = '';

    showError(s.error);
    renderResult(s.result);
  }

  async function selectMode(mode) {
    await postJson('/mode', { mode });
  }

  async function setAutoScroll(enabled) {
    await postJson('/auto-scroll', { enabled });
  }

  async function generate(path, options) {
    if (busy) return;
    setBusy(true);
    renderResult(LOADING_VIEW);
    try {
      await callApi(path, options);
    } catch (e) {
      // 413 and network errors carry no state; resync before showing the message.
      await callApi('/state').catch(() => {});
      showError(e.message);
    } finally {
      setBusy(false);
    }
  }

  el('fileInput').addEventListener('change', e => {
    const file = e.target.files[0];
    if (!file) return;
    const form = new FormData();
    form.append('file', file);
    generate('/image', { method: 'POST', body: form });
  });

  function regenerate() {
    generate('/regenerate', { method: 'POST' });
  }

  async function clearImage() {
    await callApi('/image', { method: 'DELETE' });
  }

  function submitHtml() {
    generate('/html', {
      method: 'POST',
      headers: { 'Content-Type': 'application/json' },
      body: JSON.stringify({ html: el('htmlInput').value }),
    });
  }

  // ═══════════════════════════════════
  // Result panel
  // ═══════════════════════════════════
  function renderResult(view) {
    const box = el('result');
    box.innerHTML = '';

    if (view.state !== 'populated') {
      const wrap = document.createElement('div');
      wrap.className = view.state === 'loading' ? 'result-loading' : 'result-empty';
      if (view.state === 'loading') {
        const spin = document.createElement('div');
        spin.className = 'spinner';
        wrap.appendChild(spin);
      }
      const p = document.createElement('p');
      p.textContent = view.message;
      wrap.appendChild(p);
      box.appendChild(wrap);
      return;
    }

    const header = document.createElement('div');
    header.className = 'result-header';
    const name = document.createElement('span');
    name.textContent = 'automation_script.js';
    const copyBtn = document.createElement('button');
    copyBtn.className = 'copy-btn';
    copyBtn.textContent = COPY_LABEL;
    copyBtn.addEventListener('click', () => {
      navigator.clipboard.writeText(view.script);
      copyBtn.textContent = COPIED_LABEL;
      copyBtn.classList.add('copied');
      setTimeout(() => {
        copyBtn.textContent = COPY_LABEL;
        copyBtn.classList.remove('copied');
      }, COPY_ACK_MS);
    });
    header.appendChild(name);
    header.appendChild(copyBtn);

    const code = document.createElement('pre');
    code.className = 'result-code';
    code.textContent = view.script;

    const info = document.createElement('div');
    info.className = 'result-info';
    const row = document.createElement('div');
    row.className = 'row';
    const label = document.createElement('span');
    label.className = 'label';
    label.textContent = 'Strategy';
    const badge = document.createElement('span');
    badge.className = 'badge badge-' + view.confidence_tier;
    badge.textContent = view.confidence + ' Confidence';
    row.appendChild(label);
    row.appendChild(badge);

    const explanation = document.createElement('p');
    explanation.className = 'explanation';
    explanation.textContent = view.explanation;

    const selectors = document.createElement('div');
    selectors.className = 'selectors';
    view.selectors.forEach(sel => {
      const tag = document.createElement('span');
      tag.className = 'selector';
      tag.textContent = sel;
      selectors.appendChild(tag);
    });

    info.appendChild(row);
    info.appendChild(explanation);
    info.appendChild(selectors);

    box.appendChild(header);
    box.appendChild(code);
    box.appendChild(info);
  }

  // ═══════════════════════════════════
  // Playground
  // ═══════════════════════════════════
  let noticeTimer = null;

  function renderPlayground(data) {
    const grid = el('grid');
    grid.innerHTML = '';
    data.coupons.forEach(c => {
      const card = document.createElement('div');
      card.className = 'coupon' + (c.isClipped ? ' clipped' : '');
      const img = document.createElement('img');
      img.src = c.image;
      img.alt = c.product;
      const title = document.createElement('h4');
      title.textContent = c.product;
      const discount = document.createElement('p');
      discount.textContent = c.discount;
      const btn = document.createElement('button');
      btn.className = 'demo-clip-btn';
      btn.textContent = c.isClipped ? 'Clipped' : 'Clip Coupon';
      btn.disabled = c.isClipped;
      btn.addEventListener('click', () => clipCoupon(c.id));
      card.appendChild(img);
      card.appendChild(title);
      card.appendChild(discount);
      card.appendChild(btn);
      grid.appendChild(card);
    });

    const notice = el('notice');
    clearTimeout(noticeTimer);
    if (data.notification) {
      notice.textContent = data.notification;
      notice.classList.remove('hidden');
      noticeTimer = setTimeout(() => notice.classList.add('hidden'), data.notification_ttl * 1000);
    } else {
      notice.classList.add('hidden');
    }
  }

  async function clipCoupon(id) {
    renderPlayground(await postJson('/playground/clip/' + id));
  }

  async function resetCoupons() {
    renderPlayground(await postJson('/playground/reset'));
  }

  async function mountPlayground() {
    renderPlayground(await postJson('/playground/mount'));
    window.demoClipAll = async () => {
      const data = await postJson('/playground/clip-all');
      renderPlayground(data);
      return data.clipped;
    };
  }

  window.addEventListener('pagehide', event => {
    delete window.demoClipAll;
    navigator.sendBeacon('/api/' + VIEW_ID + '/playground/unmount');
    // A page kept in the back-forward cache keeps its view for pageshow.
    if (!event.persisted) navigator.sendBeacon('/api/' + VIEW_ID + '/close');
  });

  window.addEventListener('pageshow', event => {
    if (!event.persisted) return;
    callApi('/state').then(mountPlayground).catch(() => location.reload());
  });

  callApi('/state');
  mountPlayground();
</script>
</body>
</html>
"""

if __name__ == "__main__":
    app = create_app()
    app.run(host=app.config["HOST"], port=app.config["PORT"], debug=app.config["DEBUG"], threaded=True)
