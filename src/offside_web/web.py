from __future__ import annotations
import argparse
import logging
from flask import Flask, request, jsonify, Response
from offside.buffer import TextBuffer
from offside.engine import Engine
from offside.errors import IndentError
from offside.models import IndentConfig

app = Flask(__name__)
_config: IndentConfig = IndentConfig()
log = logging.getLogger(__name__)


def _bad_request(msg: str):
    return jsonify({"error": msg}), 400


# ---------- API ----------
@app.post("/api/indent")
def api_indent():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return _bad_request("expected a JSON object")
    text = body.get("text")
    line = body.get("line")
    if not isinstance(text, str):
        return _bad_request("'text' must be a string")
    if not isinstance(line, int) or isinstance(line, bool) or line < 1:
        return _bad_request("'line' must be a 1-based integer")
    literate = body.get("literate", _config.literate)
    if literate not in ("none", "bird", "latex"):
        return _bad_request("'literate' must be none, bird or latex")
    step = body.get("indent_step")
    if step is not None and (not isinstance(step, int) or isinstance(step, bool) or step < 1):
        return _bad_request("'indent_step' must be a positive integer")

    buf = TextBuffer(text, literate=literate, tab_width=_config.tab_width)
    if line > buf.line_count():
        return _bad_request(f"'line' out of range (1..{buf.line_count()})")
    cfg = _config.with_overrides(literate=literate, indent_step=step)
    try:
        res = Engine(buf, cfg).compute_indent_candidates(buf.offset_of(line - 1))
    except IndentError as exc:
        log.info("indent request failed: %s", exc)
        return jsonify({"error": str(exc)}), 422
    return jsonify({
        "candidates": [{"column": c.column, "insert_text": c.insert_text} for c in res.candidates],
        "diagnostics": res.diagnostics,
    })


@app.get("/health")
def health():
    return jsonify({"ok": True})


# ---------- UI ----------
@app.get("/")
def home():
    # One page: paste code, pick a line, list the indentation candidates.
    html = r"""
<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width,initial-scale=1" />
<title>Offside • indentation demo</title>
<style>
:root{
  --bg:#0b0f14; --panel:#0f141b; --ink:#cfd8e3; --muted:#8a94a6;
  --accent:#6ee7ff; --border:#1c2530; --guide:rgba(110,231,255,.25);
}
*{box-sizing:border-box}
body{ margin:0; background:var(--bg); color:var(--ink); font:15px/1.45 system-ui,Segoe UI,Roboto,Arial }
.container{ max-width:980px; margin:24px auto; padding:0 16px }
.card{ background:var(--panel); border:1px solid var(--border); border-radius:16px; padding:18px }
h1{ font-size:20px; margin:0 0 8px 0 }
.mono{ font-family: ui-monospace, SFMono-Regular, Menlo, Consolas, monospace }
textarea{
  width:100%; min-height:260px; padding:12px; border-radius:12px; border:1px solid var(--border);
  background:#0b1117; color:var(--ink); outline:none; font-size:14px; tab-size:8;
}
.controls{ display:flex; gap:12px; align-items:center; margin:12px 0; flex-wrap:wrap }
.controls input, .controls select{
  background:#0b1117; color:var(--ink); border:1px solid var(--border); border-radius:8px; padding:6px 8px;
}
.err{ display:none; margin-top:12px; padding:10px 12px; border-radius:10px;
  background:rgba(255,93,93,.12); border:1px solid rgba(255,93,93,.35); color:#ffb0b0 }
.row{ display:grid; grid-template-columns:3rem 5rem 1fr; gap:10px; padding:8px 12px; border-top:1px solid var(--border) }
.head{ font-weight:600; color:var(--muted) }
.note{ color:var(--muted); font-size:13px }
</style>
</head>
<body>
  <div class="container">
    <div class="card">
      <h1>Offside indentation</h1>
      <textarea id="src" class="mono" spellcheck="false">f x | x > 0 = 1
  | otherwise = 2

main = do
  let y = f 3
  print y
</textarea>
      <div class="controls">
        <label>Line <input id="line" type="number" min="1" value="2" class="mono" style="width:5rem" /></label>
        <label>Literate
          <select id="lit"><option>none</option><option>bird</option><option>latex</option></select>
        </label>
        <label>Step <input id="step" type="number" min="1" value="4" class="mono" style="width:4rem" /></label>
      </div>
      <div id="err" class="err"></div>
      <div class="row head"><div>#</div><div>Column</div><div>Insert</div></div>
      <div id="out"></div>
      <div id="notes" class="note"></div>
    </div>
  </div>
<script>
const $ = (sel) => document.querySelector(sel);
const src = $("#src"), line = $("#line"), lit = $("#lit"), step = $("#step");
const out = $("#out"), err = $("#err"), notes = $("#notes");
let t;

function currentLine(){
  const before = src.value.slice(0, src.selectionStart);
  return before.split("\n").length;
}

async function ask(){
  err.style.display = "none";
  try{
    const resp = await fetch("/api/indent", {
      method: "POST", headers: {"Content-Type": "application/json"},
      body: JSON.stringify({text: src.value, line: parseInt(line.value || "1", 10),
                            literate: lit.value, indent_step: parseInt(step.value || "4", 10)})
    });
    const data = await resp.json();
    if(!resp.ok) throw new Error(data.error || `HTTP ${resp.status}`);
    out.innerHTML = data.candidates.map((c,i)=>`
      <div class="row mono"><div>${i}</div><div>${c.column}</div><div>${c.insert_text ? JSON.stringify(c.insert_text) : ""}</div></div>`).join("");
    notes.textContent = data.diagnostics.join(" • ");
  }catch(e){
    err.style.display = "block";
    err.textContent = `Error: ${e.message ?? e}`;
  }
}

function debounced(){ clearTimeout(t); t = setTimeout(ask, 150); }
src.addEventListener("input", debounced);
src.addEventListener("click", ()=>{ line.value = currentLine(); debounced(); });
src.addEventListener("keyup", ()=>{ line.value = currentLine(); debounced(); });
[line, lit, step].forEach(el => el.addEventListener("change", debounced));
ask();
</script>
</body>
</html>
"""
    return Response(html, mimetype="text/html")


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Run the Flask indentation demo on top of Engine")
    ap.add_argument("--literate", choices=["none", "bird", "latex"], default=None)
    ap.add_argument("--indent-step", type=int, default=None)
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=8000)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    global _config
    _config = IndentConfig().with_overrides(literate=args.literate, indent_step=args.indent_step)
    if args.verbose:
        logging.basicConfig(level=logging.INFO)
    app.run(host=args.host, port=args.port, debug=args.verbose)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
