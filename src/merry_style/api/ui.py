"""Minimal HTML front end served at the root path."""

INDEX_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>MerryStyle</title>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 2rem; }
      h1 { margin-bottom: 0.5rem; }
      .row { margin-bottom: 1rem; }
      .swatch { width: 2rem; height: 2rem; border-radius: 50%; border: 0;
                margin-right: 0.4rem; cursor: pointer; }
      .swatch.selected { outline: 3px solid #94a3b8; outline-offset: 2px; }
      button { padding: 0.4rem 0.8rem; margin-right: 0.5rem; }
      img { max-width: 420px; max-height: 420px; display: block; }
      .error { color: #b91c1c; }
    </style>
  </head>
  <body>
    <h1>MerryStyle</h1>
    <p>Add a Christmas hat to any photo.</p>
    <div class="row"><input id="file" type="file" accept="image/*" /></div>
    <div class="row" id="colors"></div>
    <div class="row">
      <button id="generate" onclick="generate()">Add Christmas Hat</button>
      <button onclick="clearImage()">Remove image</button>
    </div>
    <p id="status">Ready.</p>
    <p id="error" class="error"></p>
    <div class="row"><img id="original" alt="" /></div>
    <div class="row"><img id="result" alt="" /></div>
    <div class="row" id="actions" hidden>
      <button onclick="download()">Download</button>
      <button onclick="share()">Share</button>
      <button onclick="tryAgain()">Try Again</button>
    </div>
    <script>
      let session = null;

      async function call(method, path, body, isForm) {
        const opts = { method };
        if (body && isForm) { opts.body = body; }
        else if (body) {
          opts.body = JSON.stringify(body);
          opts.headers = { 'Content-Type': 'application/json' };
        }
        const res = await fetch(path, opts);
        const data = await res.json();
        if (!res.ok) { throw new Error(data.detail || ('Error: ' + res.status)); }
        return data;
      }

      function render(state) {
        session = state;
        document.getElementById('status').textContent =
          state.lifecycle + ' (' + state.aspect_ratio + ', ' + state.color + ')';
        document.getElementById('error').textContent = state.error || '';
        document.getElementById('original').src = state.original_image || '';
        document.getElementById('result').src = state.generated_image || '';
        document.getElementById('actions').hidden = !state.generated_image;
        document.getElementById('generate').disabled =
          !state.original_image || state.lifecycle === 'GENERATING';
        document.querySelectorAll('.swatch').forEach((el) => {
          el.classList.toggle('selected', el.title === state.color);
        });
      }

      async function start() {
        const options = await call('GET', '/options');
        const colors = document.getElementById('colors');
        options.colors.forEach((color) => {
          const btn = document.createElement('button');
          btn.className = 'swatch';
          btn.title = color.name;
          btn.style.backgroundColor = color.hex;
          btn.onclick = async () => render(
            await call('PUT', '/sessions/' + session.id + '/color', { color: color.value })
          );
          colors.appendChild(btn);
        });
        render(await call('POST', '/sessions'));
      }

      document.getElementById('file').addEventListener('change', async (event) => {
        const file = event.target.files[0];
        if (!file) { return; }
        if (!file.type.startsWith('image/')) { alert('Please upload an image file.'); return; }
        const form = new FormData();
        form.append('file', file);
        try { render(await call('POST', '/sessions/' + session.id + '/image', form, true)); }
        catch (err) { alert(err.message); }
      });

      async function generate() {
        document.getElementById('status').textContent = 'Painting with snowflakes...';
        document.getElementById('generate').disabled = true;
        try { render(await call('POST', '/sessions/' + session.id + '/generate')); }
        catch (err) { document.getElementById('error').textContent = err.message; }
      }

      async function clearImage() {
        document.getElementById('file').value = '';
        render(await call('DELETE', '/sessions/' + session.id + '/image'));
      }

      async function tryAgain() {
        render(await call('POST', '/sessions/' + session.id + '/try-again'));
      }

      function download() {
        window.location = '/sessions/' + session.id + '/download';
      }

      async function share() {
        try {
          const result = await call('POST', '/sessions/' + session.id + '/share');
          if (!result.shared) { console.error('Share failed'); }
        } catch (err) { alert(err.message); }
      }

      start();
    </script>
  </body>
</html>
"""
