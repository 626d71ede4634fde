"""
Browser side of the dev server.

BRIDGE_SCRIPT is injected into the PuzzleScript editor page. It loads the
game source from disk into the editor, recompiles, and does so again every
time the server reports that the file changed. It also gives the page a small
``window.pzsdev`` API for saving the editor contents and for exporting a
standalone build that starts at a given level.
"""

BRIDGE_SCRIPT = """\
(function() {
  var RELOAD_URL = '/__reload';

  function editorText() {
    var textarea = document.getElementById('code');
    var editor = textarea.editorreference;
    return editor ? editor.getValue() : textarea.value;
  }

  async function loadGame() {
    try {
      var response = await fetch('/game.pzs', { cache: 'no-store' });
      if (!response.ok) throw new Error('Failed to fetch game.pzs');
      var code = await response.text();

      var textarea = document.getElementById('code');
      var editor = textarea.editorreference;
      if (editor) {
        editor.setValue(code);
      } else {
        textarea.value = code;
      }

      if (typeof compile === 'function') {
        compile(['restart']);
      }
      console.log('[pzsdev] Game loaded and compiled');
    } catch (err) {
      console.error('[pzsdev] Error loading game:', err);
    }
  }

  function connect() {
    var source = new EventSource(RELOAD_URL);
    source.onopen = function() {
      console.log('[pzsdev] Reload channel connected');
    };
    source.addEventListener('reload-game', function() {
      console.log('[pzsdev] Reloading game...');
      loadGame();
    });
    source.onerror = function() {
      console.log('[pzsdev] Reload channel closed, reconnecting in 2s...');
      source.close();
      setTimeout(connect, 2000);
    };
  }

  async function post(url) {
    var response = await fetch(url, {
      method: 'POST',
      headers: { 'Content-Type': 'text/plain; charset=utf-8' },
      body: editorText()
    });
    if (!response.ok) {
      throw new Error(url + ' failed: ' + response.status + ' ' + (await response.text()));
    }
    return response;
  }

  window.pzsdev = {
    reload: loadGame,
    save: function() {
      return post('/game.pzs');
    },
    play: async function(level) {
      var response = await post('/play?level=' + encodeURIComponent(level));
      return response.json();
    }
  };

  function start() {
    setTimeout(loadGame, 500);
    connect();
  }

  if (document.readyState === 'loading') {
    document.addEventListener('DOMContentLoaded', start);
  } else {
    start();
  }
})();
"""


def inject_bridge(html: str) -> str:
    """Insert the bridge script before the first </body>, or append it."""
    tag = f"<script>\n{BRIDGE_SCRIPT}</script>\n"
    index = html.find("</body>")
    if index == -1:
        return html + tag
    return html[:index] + tag + html[index:]
