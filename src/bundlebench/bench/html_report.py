"""Static HTML chart report.

Renders a self-contained page that embeds the serialized
:class:`BenchmarkReport` and draws its charts in the browser with
Chart.js (loaded from a CDN):

- installed package size per version (bar)
- mean build time per version (bar)
- build time of every run (line)

plus a stats grid and comparison sentences. The page logic only reads
the embedded data; nothing here depends on how it was measured.
"""

from __future__ import annotations

import html
import json
import logging
from pathlib import Path
from typing import Mapping

from bundlebench.bench.results import BenchmarkReport

log = logging.getLogger("bundlebench")

CHART_JS_URL = "https://cdn.jsdelivr.net/npm/chart.js"
DATALABELS_URL = "https://cdn.jsdelivr.net/npm/chartjs-plugin-datalabels@2.0.0"

_STYLE = """
        body {
            font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif;
            max-width: 1200px;
            margin: 0 auto;
            padding: 20px;
            background-color: #f5f5f5;
        }
        .container {
            background-color: white;
            border-radius: 10px;
            padding: 20px;
            box-shadow: 0 4px 6px rgba(0, 0, 0, 0.1);
            margin-bottom: 20px;
        }
        h1, h2, h3 { color: #333; text-align: center; }
        .subtitle {
            text-align: center;
            color: #666;
            margin-top: -10px;
            margin-bottom: 20px;
            font-size: 1.1em;
        }
        .chart-container { position: relative; height: 400px; margin: 20px 0; }
        .comparison {
            background-color: #f0f8ff;
            padding: 15px;
            border-radius: 8px;
            margin: 20px 0;
            text-align: center;
            font-size: 1.2em;
        }
        .faster { color: #2e8b57; font-weight: bold; }
        .slower { color: #dc143c; font-weight: bold; }
        .stats-grid {
            display: grid;
            grid-template-columns: repeat(auto-fit, minmax(200px, 1fr));
            gap: 15px;
            margin: 20px 0;
        }
        .stat-card {
            background-color: #f9f9f9;
            border-radius: 8px;
            padding: 15px;
            text-align: center;
            box-shadow: 0 2px 4px rgba(0, 0, 0, 0.05);
        }
        .stat-value { font-size: 1.8em; font-weight: bold; margin: 10px 0; color: #444; }
        .stat-label { color: #666; font-size: 0.9em; }
        .package-size {
            background-color: #f0f8ff;
            padding: 20px;
            border-radius: 8px;
            margin: 20px 0;
            text-align: center;
        }
        .build-details { margin-top: 40px; }
        .unit { font-size: 0.7em; color: #777; vertical-align: super; }
        .section-title {
            background-color: #f0f8ff;
            padding: 10px;
            border-radius: 5px;
            margin-bottom: 20px;
        }
"""

# Page logic. Reads the `data` and `labels` globals defined before it.
_SCRIPT = """
        const RESERVED = ['comparison', 'packageSizes', 'packageSizeComparison'];
        const COLORS = ['rgba(54, 162, 235, ', 'rgba(255, 99, 132, '];

        function formatBytes(bytes, decimals = 2) {
            if (!bytes || bytes === 0) return '0 Bytes';
            const k = 1024;
            const dm = decimals < 0 ? 0 : decimals;
            const sizes = ['Bytes', 'KB', 'MB', 'GB', 'TB'];
            let i = Math.floor(Math.log(Math.abs(bytes)) / Math.log(k));
            i = Math.max(0, Math.min(i, sizes.length - 1));
            return parseFloat((bytes / Math.pow(k, i)).toFixed(dm)) + ' ' + sizes[i];
        }

        function formatPct(value) {
            return value === null || value === undefined
                ? 'N/A' : Math.abs(value).toFixed(2) + '%';
        }

        function span(cls, text) {
            return '<span class="' + cls + '">' + text + '</span>';
        }

        function barChart(canvasId, names, values, title, axis, formatter) {
            new Chart(document.getElementById(canvasId).getContext('2d'), {
                type: 'bar',
                data: {
                    labels: names,
                    datasets: [{
                        label: title,
                        data: values,
                        backgroundColor: COLORS.map(c => c + '0.7)'),
                        borderColor: COLORS.map(c => c + '1)'),
                        borderWidth: 1
                    }]
                },
                options: {
                    responsive: true,
                    maintainAspectRatio: false,
                    plugins: {
                        title: { display: true, text: title, font: { size: 18 } },
                        legend: { display: false },
                        datalabels: {
                            anchor: 'end',
                            align: 'top',
                            formatter: formatter,
                            font: { weight: 'bold' }
                        }
                    },
                    scales: { y: { beginAtZero: true, title: { display: true, text: axis } } }
                }
            });
        }

        function renderPackageSizes(versions, names) {
            const sizes = data.packageSizes || {};
            if (!versions.some(v => v in sizes)) {
                document.getElementById('package-size').style.display = 'none';
                return;
            }
            barChart('packageSizeChart', names, versions.map(v => sizes[v]),
                'Installed Package Size', 'Size (bytes)', v => formatBytes(v));

            const comp = data.packageSizeComparison;
            if (!comp) return;
            const div = document.createElement('div');
            div.className = 'comparison';
            const pct = formatPct(comp.percentChange);
            const delta = formatBytes(Math.abs(comp.diff));
            if (comp.smallerVersion === 'same') {
                div.innerHTML = names[0] + ' and ' + names[1] + ' have the same package size';
            } else if (comp.diff > 0) {
                div.innerHTML = span('faster', names[0]) + ' is ' + span('faster', pct)
                    + ' smaller than ' + names[1] + ' (' + delta + ' saved)';
            } else {
                div.innerHTML = span('slower', names[0]) + ' is ' + span('slower', pct)
                    + ' larger than ' + names[1] + ' (' + delta + ' extra)';
            }
            document.getElementById('package-size').appendChild(div);
        }

        function renderComparison(versions, names) {
            const comp = data.comparison;
            const el = document.getElementById('comparison-text');
            if (!comp) return;
            const pct = formatPct(comp.percentChange);
            const saved = Math.abs(comp.diff).toFixed(2) + 's';
            const idx = versions.indexOf(comp.fasterVersion);
            if (idx < 0) {
                el.innerHTML = names[0] + ' and ' + names[1] + ' perform the same';
                return;
            }
            el.innerHTML = span('faster', names[idx]) + ' is ' + span('faster', pct)
                + ' faster than ' + names[1 - idx] + ' (' + saved + ' saved)';
        }

        function statCard(label, value) {
            return '<div class="stat-card"><div class="stat-label">' + label
                + '</div><div class="stat-value">' + value + '</div></div>';
        }

        function renderStats(versions, names) {
            const seconds = v => v.toFixed(2) + '<span class="unit">s</span>';
            let cards = '';
            versions.forEach((version, index) => {
                const vd = data[version];
                cards += statCard('Version', names[index])
                    + statCard('Mean Time', seconds(vd.average))
                    + statCard('Min Time', seconds(vd.min))
                    + statCard('Max Time', seconds(vd.max))
                    + statCard('Build Size', formatBytes(vd.buildSize));
            });
            document.getElementById('stats-grid').innerHTML = cards;
        }

        function renderRuns(versions, names) {
            const longest = Math.max(...versions.map(v => data[v].runs.length));
            new Chart(document.getElementById('runsChart').getContext('2d'), {
                type: 'line',
                data: {
                    labels: Array.from({ length: longest }, (_, i) => 'Run ' + (i + 1)),
                    datasets: versions.map((version, index) => ({
                        label: names[index],
                        data: data[version].runs,
                        borderColor: COLORS[index % 2] + '1)',
                        backgroundColor: COLORS[index % 2] + '0.2)',
                        fill: true,
                        tension: 0.1
                    }))
                },
                options: {
                    responsive: true,
                    maintainAspectRatio: false,
                    plugins: {
                        title: { display: true, text: 'Build Time per Run', font: { size: 18 } },
                        datalabels: { display: false }
                    },
                    scales: {
                        y: { beginAtZero: true, title: { display: true, text: 'Time (seconds)' } }
                    }
                }
            });
        }

        function renderCharts() {
            if (typeof ChartDataLabels !== 'undefined') Chart.register(ChartDataLabels);
            const versions = Object.keys(data).filter(key => !RESERVED.includes(key));
            const names = versions.map(v => labels[v] || v);
            renderPackageSizes(versions, names);
            renderComparison(versions, names);
            renderStats(versions, names);
            barChart('averageChart', names, versions.map(v => data[v].average),
                'Mean Build Time (seconds)', 'Time (seconds)', v => v.toFixed(2) + 's');
            renderRuns(versions, names);
        }

        renderCharts();
"""


def _script_literal(value: object) -> str:
    """Serialize *value* as JSON that is safe inside a ``<script>`` element."""
    return json.dumps(value).replace("</", "<\\/")


def render_html(
    report: BenchmarkReport,
    *,
    title: str = "Bundler Benchmark",
    subtitle: str = "",
    labels: Mapping[str, str] | None = None,
) -> str:
    """Render the benchmark report as a standalone HTML document.

    Args:
        report: The aggregated benchmark report, embedded verbatim.
        title: Page heading.
        subtitle: Optional line under the heading.
        labels: Optional display label per version identifier.

    Returns:
        The HTML document as a string.
    """
    subtitle_html = f'<div class="subtitle">{html.escape(subtitle)}</div>' if subtitle else ""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{html.escape(title)}</title>
    <script src="{CHART_JS_URL}"></script>
    <script src="{DATALABELS_URL}"></script>
    <style>{_STYLE}    </style>
</head>
<body>
    <div class="container">
        <h1>{html.escape(title)}</h1>
        {subtitle_html}

        <div id="package-size" class="package-size">
            <h2 class="section-title">Installed Package Size</h2>
            <div class="chart-container">
                <canvas id="packageSizeChart"></canvas>
            </div>
        </div>

        <div class="build-details">
            <h2 class="section-title">Build Performance</h2>
            <div class="comparison" id="comparison-text"></div>
            <div class="chart-container">
                <canvas id="averageChart"></canvas>
            </div>

            <h2>Detailed Statistics</h2>
            <div class="stats-grid" id="stats-grid"></div>

            <div class="chart-container">
                <canvas id="runsChart"></canvas>
            </div>
        </div>
    </div>

    <script>
        const data = {_script_literal(report.to_dict())};
        const labels = {_script_literal(dict(labels or {}))};
{_SCRIPT}    </script>
</body>
</html>
"""


def write_html_report(
    path: Path,
    report: BenchmarkReport,
    *,
    title: str = "Bundler Benchmark",
    subtitle: str = "",
    labels: Mapping[str, str] | None = None,
) -> None:
    """Render the report and write it to *path*, overwriting it."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        render_html(report, title=title, subtitle=subtitle, labels=labels),
        encoding="utf-8",
    )
    log.info("HTML report written to %s", path)
