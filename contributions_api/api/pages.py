INDEX_PAGE = """<!DOCTYPE html>
<html>
  <head>
    <title>GitHub Contributions API</title>
    <style>
      body { font-family: Arial, sans-serif; margin: 40px; }
      .endpoint { background: #f5f5f5; padding: 15px; margin: 10px 0; border-radius: 5px; }
      code { background: #e8e8e8; padding: 2px 4px; border-radius: 3px; }
    </style>
  </head>
  <body>
    <h1>GitHub Contributions Heatmap API</h1>
    <p>Fetches public GitHub contribution calendars as JSON or as an SVG heatmap card.</p>

    <div class="endpoint">
      <h3>Get Contributions (JSON)</h3>
      <p><strong>Endpoint:</strong> <code>GET /api/contributions/:username</code></p>
      <p><strong>Parameters:</strong></p>
      <ul>
        <li><code>username</code> (path): GitHub username</li>
        <li><code>from</code> (query, optional): Start date (YYYY-MM-DD), defaults to current year Jan 1</li>
        <li><code>to</code> (query, optional): End date (YYYY-MM-DD), defaults to current year Dec 31</li>
      </ul>
      <p><strong>Example:</strong> <code>/api/contributions/octocat?from=2024-01-01&amp;to=2024-12-31</code></p>
    </div>

    <div class="endpoint">
      <h3>Get Contributions Heatmap (SVG)</h3>
      <p><strong>Endpoint:</strong> <code>GET /api/contributions/:username/svg</code></p>
      <p><strong>Parameters:</strong> same as the JSON endpoint.</p>
      <p><strong>Example:</strong> <code>/api/contributions/octocat/svg?from=2024-01-01&amp;to=2024-12-31</code></p>
      <p><strong>Returns:</strong> SVG image that mimics GitHub's contribution heatmap</p>
    </div>

    <div class="endpoint">
      <h3>Health Check</h3>
      <p><strong>Endpoint:</strong> <code>GET /health</code></p>
    </div>
  </body>
</html>
"""
