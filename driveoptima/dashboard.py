"""
Browser dashboard for DriveOptima.

A single page that talks to the JSON API and listens on /ws for session
updates, so the loading indicator follows the server-side state.
"""

DASHBOARD_HTML = '''<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>DriveOptima</title>
    <style>
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body { font-family: system-ui, -apple-system, sans-serif; background: #f9fafb; color: #111827; }
        header { display: flex; justify-content: space-between; align-items: center; height: 64px;
                 padding: 0 32px; background: #fff; border-bottom: 1px solid #e5e7eb; }
        .brand { font-weight: 700; font-size: 1.1rem; }
        .user { font-size: 0.8rem; color: #4b5563; }
        .link { background: none; border: none; color: #9ca3af; cursor: pointer; margin-left: 12px; }
        main { max-width: 1100px; margin: 0 auto; padding: 32px; }
        .card { background: #fff; border: 1px solid #e5e7eb; border-radius: 16px; padding: 24px; }
        .center { max-width: 560px; margin: 48px auto; text-align: center; }
        .btn { height: 44px; padding: 0 24px; border-radius: 10px; border: 1px solid #e5e7eb;
               background: #fff; font-weight: 600; cursor: pointer; }
        .btn.primary { background: #4f46e5; color: #fff; border-color: #4f46e5; }
        .btn:disabled { opacity: 0.5; cursor: default; }
        .grid { display: grid; grid-template-columns: 1fr 2fr; gap: 32px; }
        .stat { font-size: 1.5rem; font-weight: 700; }
        .muted { color: #6b7280; font-size: 0.8rem; }
        .summary { background: #eef2ff; border: 1px solid #e0e7ff; border-radius: 12px; padding: 16px; margin: 16px 0; }
        .rec { border: 1px solid #e5e7eb; border-radius: 12px; padding: 16px; margin-bottom: 12px;
               background: #fff; cursor: pointer; }
        .rec.selected { border-color: #a5b4fc; box-shadow: 0 2px 6px rgba(79, 70, 229, 0.15); }
        .rec.completed { background: #f9fafb; opacity: 0.6; cursor: default; }
        .badge { font-size: 0.65rem; font-weight: 700; text-transform: uppercase; color: #6b7280; margin-right: 8px; }
        .bar { height: 8px; background: #6366f1; border-radius: 4px; }
        .spinner { width: 56px; height: 56px; border: 4px solid #e5e7eb; border-top-color: #4f46e5;
                   border-radius: 50%; animation: spin 1s linear infinite; margin: 0 auto 24px; }
        @keyframes spin { to { transform: rotate(360deg); } }
        .hidden { display: none; }
    </style>
</head>
<body>
    <div id="login" class="center card hidden">
        <h2>DriveOptima AI</h2>
        <p class="muted" style="margin: 12px 0 24px">Your intelligent storage architect.</p>
        <button class="btn" onclick="login()">Enter Demo Mode</button>
    </div>

    <div id="app" class="hidden">
        <header>
            <span class="brand">DriveOptima</span>
            <span><span id="user" class="user"></span><button class="link" onclick="logout()">Sign Out</button></span>
        </header>
        <main>
            <div id="empty" class="center hidden">
                <h1>Tame your digital chaos.</h1>
                <p class="muted" style="margin: 16px 0 32px">
                    We analyze your file contents and hierarchy to recommend renaming,
                    moving, and consolidation strategies that make sense.
                </p>
                <button class="btn primary" onclick="analyze('deep')">Start Deep Analysis</button>
                <button class="btn" onclick="analyze('weekly')">Quick Weekly Sync</button>
                <p class="muted" style="margin-top: 24px">Shared files not owned by you are safe.</p>
            </div>
            <div id="loading" class="center hidden">
                <div class="spinner"></div>
                <h3 id="loading-title">Analyzing Architecture</h3>
            </div>
            <div id="report" class="grid hidden">
                <div>
                    <div class="card">
                        <p class="muted">IMPACT ANALYSIS</p>
                        <p><span id="redundant" class="stat"></span> <span class="muted">Redundant Folders</span></p>
                        <p><span id="saved" class="stat"></span> <span class="muted">Space Saved</span></p>
                        <div id="types" style="margin-top: 16px"></div>
                    </div>
                    <div class="card" style="margin-top: 16px">
                        <p>Selected Actions: <strong id="selected-count">0</strong></p>
                        <button id="apply" class="btn primary" style="margin-top: 12px; width: 100%" onclick="applySelected()">
                            Apply Selected
                        </button>
                    </div>
                </div>
                <div>
                    <h2>Optimization Plan <span id="mode" class="muted"></span></h2>
                    <div class="summary"><strong>AI Executive Summary</strong><p id="summary"></p></div>
                    <button class="btn" onclick="analyze(state.mode || 'deep')">Re-run Analysis</button>
                    <div id="recs" style="margin-top: 16px"></div>
                </div>
            </div>
        </main>
    </div>

    <script>
        let state = null;
        let socket = null;

        async function api(method, path, body) {
            const response = await fetch(path, {
                method,
                headers: {'Content-Type': 'application/json'},
                body: body ? JSON.stringify(body) : undefined,
            });
            const data = await response.json();
            if (!response.ok) throw new Error(data.detail || response.statusText);
            return data;
        }

        function show(id, visible) {
            document.getElementById(id).classList.toggle('hidden', !visible);
        }

        function escapeHtml(text) {
            return (text == null ? '' : String(text))
                .replace(/&/g, '&amp;')
                .replace(/</g, '&lt;')
                .replace(/>/g, '&gt;')
                .replace(/"/g, '&quot;')
                .replace(/'/g, '&#39;');
        }

        function render() {
            const busy = state.loading || state.applying;
            document.getElementById('user').textContent = state.user;
            show('empty', !state.report && !busy);
            show('loading', busy);
            show('report', !!state.report && !busy);
            document.getElementById('loading-title').textContent =
                state.applying ? 'Applying Changes' : 'Analyzing Architecture';
            if (!state.report) return;

            const report = state.report;
            document.getElementById('redundant').textContent = report.stats.redundantFolders;
            document.getElementById('saved').textContent = report.stats.potentialSpaceSaved;
            document.getElementById('summary').textContent = report.summary;
            document.getElementById('mode').textContent = state.mode === 'weekly' ? 'Quick Scan' : 'Deep Scan';
            document.getElementById('selected-count').textContent = state.selected.length;
            document.getElementById('apply').disabled = state.selected.length === 0;

            const total = state.fileTypes.reduce((sum, bucket) => sum + bucket.value, 0) || 1;
            document.getElementById('types').innerHTML = state.fileTypes.map(bucket => `
                <p class="muted">${escapeHtml(bucket.name)} (${bucket.value})</p>
                <div class="bar" style="width: ${100 * bucket.value / total}%"></div>
            `).join('');

            document.getElementById('recs').innerHTML = report.recommendations.map(rec => {
                const completed = state.completed.includes(rec.id);
                const selected = state.selected.includes(rec.id);
                const target = rec.type === 'RENAME'
                    ? `${escapeHtml(rec.currentPath)} &rarr; <strong>${escapeHtml(rec.suggestedName)}</strong>`
                    : `"${escapeHtml(rec.currentPath)}" &rarr; <strong>${escapeHtml(rec.suggestedFolderId || 'Target Folder')}</strong>`;
                const quick = !completed && rec.type === 'RENAME'
                    ? `<button class="link" data-quick-apply="${escapeHtml(rec.id)}">Quick Apply</button>` : '';
                return `
                    <div class="rec ${completed ? 'completed' : selected ? 'selected' : ''}"
                         data-id="${escapeHtml(rec.id)}" data-completed="${completed}">
                        <span class="badge">${escapeHtml(rec.type)}</span>
                        <span class="badge">${escapeHtml(rec.impactScore)}% Impact</span>
                        <span class="badge">${completed ? 'Done' : selected ? 'Selected' : ''}</span>
                        <p>${target}</p>
                        <p class="muted">${escapeHtml(rec.reasoning)}</p>
                        ${quick}
                    </div>`;
            }).join('');
        }

        function connect() {
            const scheme = location.protocol === 'https:' ? 'wss' : 'ws';
            socket = new WebSocket(`${scheme}://${location.host}/ws`);
            socket.onmessage = (event) => {
                const message = JSON.parse(event.data);
                if (message.type === 'session') {
                    state = message.data;
                    render();
                }
            };
        }

        async function refresh() {
            state = await api('GET', '/api/session');
            render();
        }

        async function boot() {
            const me = await api('GET', '/api/auth/me');
            show('login', !me.user);
            show('app', !!me.user);
            if (me.user) {
                await refresh();
                connect();
            }
        }

        async function login() {
            await api('POST', '/api/auth/login');
            await boot();
        }

        async function logout() {
            if (socket) socket.close();
            await api('POST', '/api/auth/logout');
            state = null;
            await boot();
        }

        async function analyze(mode) {
            try {
                state = await api('POST', '/api/analysis', {mode});
            } catch (err) {
                console.error(err);
                alert('Failed to analyze drive. ' + err.message);
                state = await api('GET', '/api/session');
            }
            render();
        }

        async function toggle(id) {
            state = await api('POST', `/api/recommendations/${encodeURIComponent(id)}/toggle`);
            render();
        }

        async function quickApply(id) {
            state = await api('POST', `/api/recommendations/${encodeURIComponent(id)}/apply`);
            render();
        }

        async function applySelected() {
            state = await api('POST', '/api/recommendations/apply');
            render();
            alert('Changes successfully applied to your Google Drive!');
        }

        // Recommendation ids come from the classifier; they travel only through data attributes
        document.getElementById('recs').addEventListener('click', (event) => {
            const quick = event.target.closest('[data-quick-apply]');
            if (quick) {
                quickApply(quick.dataset.quickApply);
                return;
            }
            const card = event.target.closest('[data-id]');
            if (card && card.dataset.completed !== 'true') {
                toggle(card.dataset.id);
            }
        });

        boot();
    </script>
</body>
</html>
'''
