"""Self-contained interactive HTML report.

The records are embedded as JSON and rendered client-side, so the file
works offline and can be mailed around as a single attachment.
"""

from __future__ import annotations

import html
import json
from datetime import datetime
from string import Template

from .models import CanonicalRecord
from .summary import SubmissionSummary

# Columns shown in the table; the full record is in the CSV/JSON exports.
TABLE_COLUMNS = [
    "CreatedDateTime",
    "Source",
    "Category",
    "SenderEmailAddress",
    "RecipientEmailAddress",
    "Subject",
    "InternetMessageId",
    "ResultCategory",
    "ResultDetail",
    "Status",
    "AdminReviewResult",
    "IsAttackSimulation",
]

_TEMPLATE = Template("""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width, initial-scale=1" />
<title>$title</title>
<style>
body{font-family:Segoe UI,Helvetica,Arial,sans-serif;background:#f4f6f9;color:#1f2933;margin:0;padding:24px;}
h1{margin:0 0 4px 0;font-size:1.8rem;}
.meta{color:#52606d;font-size:0.85rem;margin-bottom:16px;}
.meta code{background:#e4e7eb;padding:1px 6px;border-radius:4px;}
.tiles{display:grid;grid-template-columns:repeat(auto-fit,minmax(200px,1fr));gap:12px;margin-bottom:16px;}
.tile{background:#fff;border:1px solid #d9e2ec;border-radius:10px;padding:12px 14px;}
.tile h3{margin:0 0 6px 0;font-size:0.75rem;text-transform:uppercase;letter-spacing:0.04em;color:#52606d;}
.tile .value{font-size:1.6rem;font-weight:bold;}
.tile ul{list-style:none;margin:0;padding:0;font-size:0.85rem;}
.toolbar{display:flex;gap:10px;align-items:center;margin-bottom:10px;}
.toolbar input,.toolbar select{padding:6px 10px;border:1px solid #bcccdc;border-radius:6px;font-size:0.9rem;}
.toolbar input{flex:1;}
table{width:100%;border-collapse:collapse;background:#fff;font-size:0.85rem;}
th,td{border-bottom:1px solid #e4e7eb;padding:6px 8px;text-align:left;vertical-align:top;overflow-wrap:anywhere;}
th{background:#243b53;color:#fff;cursor:pointer;position:sticky;top:0;}
tr:nth-child(even) td{background:#f8fafc;}
.badge{display:inline-block;padding:1px 6px;border-radius:4px;font-size:0.75rem;font-weight:bold;margin-right:4px;}
.badge-recovered{background:#fff3c4;color:#8d2b0b;}
.badge-synthetic{background:#ffe3e3;color:#8a041a;}
.empty{padding:24px;text-align:center;color:#52606d;}
</style>
</head>
<body>
<h1>$title</h1>
<div class="meta">Generated $generated &middot; filter <code>$filter</code></div>
<div class="tiles" id="tiles"></div>
<div class="toolbar">
<input id="search" type="search" placeholder="Search all columns" />
<select id="category"><option value="">All categories</option></select>
<span id="shown"></span>
</div>
<table>
<thead><tr id="head"></tr></thead>
<tbody id="rows"></tbody>
</table>
<script id="report-records" type="application/json">$records</script>
<script id="report-summary" type="application/json">$summary</script>
<script id="report-columns" type="application/json">$columns</script>
<script>
(function () {
  function load(id) { return JSON.parse(document.getElementById(id).textContent); }
  var records = load("report-records");
  var summary = load("report-summary");
  var columns = load("report-columns");
  var sortKey = null, sortAsc = true;

  function el(tag, text, cls) {
    var node = document.createElement(tag);
    if (text !== undefined) { node.textContent = text; }
    if (cls) { node.className = cls; }
    return node;
  }

  function tile(title, value, counts) {
    var box = el("div", undefined, "tile");
    box.appendChild(el("h3", title));
    if (counts) {
      var list = el("ul");
      Object.keys(counts).forEach(function (k) { list.appendChild(el("li", k + ": " + counts[k])); });
      box.appendChild(list);
    } else {
      box.appendChild(el("div", String(value), "value"));
    }
    return box;
  }

  var tiles = document.getElementById("tiles");
  tiles.appendChild(tile("Submissions", summary.total));
  tiles.appendChild(tile("By category", null, summary.by_category));
  tiles.appendChild(tile("By verdict", null, summary.by_verdict));
  tiles.appendChild(tile("Message-ID provenance", null, summary.by_provenance));
  tiles.appendChild(tile("Attack simulations", summary.attack_simulations));

  var categorySelect = document.getElementById("category");
  Object.keys(summary.by_category).forEach(function (c) {
    var opt = el("option", c);
    opt.value = c;
    categorySelect.appendChild(opt);
  });

  var head = document.getElementById("head");
  columns.forEach(function (col) {
    var th = el("th", col);
    th.addEventListener("click", function () {
      sortAsc = sortKey === col ? !sortAsc : true;
      sortKey = col;
      render();
    });
    head.appendChild(th);
  });

  function identifierCell(value) {
    var td = el("td");
    if (value.indexOf("RETRIEVED:") === 0) {
      td.appendChild(el("span", "recovered", "badge badge-recovered"));
    } else if (value.indexOf("ALT-ID:") === 0) {
      td.appendChild(el("span", "synthetic", "badge badge-synthetic"));
    }
    td.appendChild(document.createTextNode(value));
    return td;
  }

  function render() {
    var query = document.getElementById("search").value.toLowerCase();
    var category = categorySelect.value;
    var rows = records.filter(function (r) {
      if (category && r.Category !== category) { return false; }
      if (!query) { return true; }
      return columns.some(function (c) { return String(r[c] || "").toLowerCase().indexOf(query) !== -1; });
    });
    if (sortKey) {
      rows.sort(function (a, b) {
        var x = String(a[sortKey] || ""), y = String(b[sortKey] || "");
        return (x < y ? -1 : x > y ? 1 : 0) * (sortAsc ? 1 : -1);
      });
    }
    var body = document.getElementById("rows");
    body.innerHTML = "";
    if (!rows.length) {
      var tr = el("tr");
      var td = el("td", "No submissions match.", "empty");
      td.colSpan = columns.length;
      tr.appendChild(td);
      body.appendChild(tr);
    }
    rows.forEach(function (r) {
      var tr = el("tr");
      columns.forEach(function (c) {
        tr.appendChild(c === "InternetMessageId" ? identifierCell(r[c] || "") : el("td", r[c] || ""));
      });
      body.appendChild(tr);
    });
    document.getElementById("shown").textContent = rows.length + " of " + records.length + " shown";
  }

  document.getElementById("search").addEventListener("input", render);
  categorySelect.addEventListener("change", render);
  render();
})();
</script>
</body>
</html>
""")


def _embed_json(data: object) -> str:
    """JSON for an inline ``<script>`` block; ``</`` cannot close the tag early."""
    return json.dumps(data, ensure_ascii=False).replace("</", "<\\/")


def render_html_report(
    records: list[CanonicalRecord],
    summary: SubmissionSummary,
    *,
    generated_at: datetime,
    filter_expression: str = "",
    title: str = "User-Reported Email Threat Submissions",
) -> str:
    return _TEMPLATE.substitute(
        title=html.escape(title),
        generated=html.escape(generated_at.strftime("%Y-%m-%d %H:%M:%S UTC")),
        filter=html.escape(filter_expression),
        records=_embed_json([record.to_export_row() for record in records]),
        summary=_embed_json(summary.as_dict()),
        columns=_embed_json(TABLE_COLUMNS),
    )
