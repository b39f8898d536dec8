from html import escape

from .config import Settings

_TEMPLATE = r"""
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <meta charset="UTF-8" />
        <title>__APP_NAME__</title>
        <meta name="viewport" content="width=device-width, initial-scale=1" />
        <style>
            :root {
                --bg: #050816;
                --card: #020617;
                --accent: #6366f1;
                --accent-soft: rgba(99, 102, 241, 0.15);
                --accent-2: #22c55e;
                --text: #e5e7eb;
                --muted: #9ca3af;
                --border: #1f2933;
                --error: #f97373;
            }
            * { box-sizing: border-box; }
            body {
                margin: 0;
                font-family: Inter, system-ui, -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif;
                background: radial-gradient(circle at top left, #1e293b 0, #020617 35%, #020617 100%);
                color: var(--text);
            }
            .shell {
                min-height: 100vh;
                display: flex;
                align-items: center;
                justify-content: center;
                padding: 32px 16px;
            }
            .card {
                width: 100%;
                max-width: 620px;
                background: linear-gradient(145deg, rgba(15,23,42,0.96), rgba(15,23,42,0.98));
                border-radius: 18px;
                padding: 28px 24px;
                border: 1px solid rgba(148,163,184,0.15);
                box-shadow: 0 28px 80px rgba(15,23,42,0.85), 0 0 0 1px rgba(15,23,42,0.8);
            }
            .header { text-align: center; margin-bottom: 20px; }
            .title { font-size: 30px; font-weight: 750; letter-spacing: 0.02em; }
            .subtitle { font-size: 14px; color: var(--accent); margin-top: 4px; }
            .intro { font-size: 13px; color: var(--muted); text-align: center; line-height: 1.6; }
            label.field { display: block; font-size: 12px; font-weight: 700; color: var(--muted); margin: 16px 0 6px; }
            textarea, input[type="text"] {
                width: 100%;
                padding: 10px 12px;
                border-radius: 10px;
                border: 1px solid rgba(148,163,184,0.5);
                background: rgba(15,23,42,0.9);
                color: var(--text);
                font-size: 13px;
                font-family: inherit;
            }
            .divider { display: flex; align-items: center; gap: 10px; margin: 18px 0; font-size: 11px; font-weight: 700; color: var(--muted); }
            .divider::before, .divider::after { content: ""; flex: 1; height: 1px; background: rgba(148,163,184,0.3); }
            .upload-zone {
                padding: 16px;
                border-radius: 16px;
                border: 1px dashed rgba(148,163,184,0.5);
                background: radial-gradient(circle at top left, var(--accent-soft), rgba(15,23,42,0.85));
                display: flex;
                flex-direction: column;
                align-items: center;
                gap: 8px;
            }
            .file-input { position: relative; overflow: hidden; display: inline-flex; }
            .file-input input[type="file"] { position: absolute; inset: 0; opacity: 0; cursor: pointer; }
            .file-name { font-size: 12px; color: var(--accent); font-style: italic; }
            .hint { font-size: 11px; color: var(--error); }
            .btn {
                border: none;
                border-radius: 999px;
                padding: 9px 16px;
                font-size: 13px;
                font-weight: 650;
                cursor: pointer;
                color: var(--text);
                background: rgba(15,23,42,0.9);
                border: 1px solid rgba(148,163,184,0.4);
            }
            .btn-primary { background: linear-gradient(120deg, #6366f1, #4338ca); border: none; }
            .btn:disabled { opacity: 0.55; cursor: not-allowed; }
            .btn-link { background: none; border: none; color: var(--muted); font-size: 12px; cursor: pointer; }
            .btn-link:hover { color: var(--error); }
            .submit { width: 100%; margin-top: 18px; padding: 13px; font-size: 15px; }
            .error-box { margin-top: 18px; padding: 12px; border-radius: 10px; border-left: 4px solid var(--error); background: rgba(249,115,115,0.12); font-size: 13px; display: none; }
            .results { margin-top: 22px; border-top: 3px solid var(--accent); padding-top: 16px; display: none; }
            .results h2 { font-size: 18px; margin: 0 0 12px; }
            .list-item { display: flex; align-items: center; gap: 10px; padding: 10px 12px; margin-bottom: 8px; border-radius: 12px; background: rgba(99,102,241,0.08); font-size: 13px; font-weight: 600; }
            .rank { width: 26px; height: 26px; border-radius: 999px; background: var(--accent); display: inline-flex; align-items: center; justify-content: center; font-size: 12px; font-weight: 800; }
            .summary { margin-top: 12px; padding: 10px 12px; border-left: 4px solid var(--accent); border-radius: 8px; background: rgba(99,102,241,0.08); font-size: 12px; color: var(--muted); }
            .summary strong { color: var(--text); }

            .chat-launcher { position: fixed; right: 18px; bottom: 18px; width: 60px; height: 60px; border-radius: 999px; font-size: 24px; z-index: 50; }
            .chat-window {
                position: fixed; right: 18px; bottom: 18px; z-index: 50;
                width: min(380px, calc(100vw - 36px)); height: min(500px, 75vh);
                display: none; flex-direction: column;
                background: var(--card); border: 1px solid rgba(148,163,184,0.25); border-radius: 14px;
                box-shadow: 0 28px 80px rgba(2,6,23,0.9);
            }
            .chat-window.open { display: flex; }
            .chat-header { display: flex; justify-content: space-between; align-items: center; padding: 12px 14px; background: var(--accent); border-radius: 14px 14px 0 0; font-weight: 700; }
            .chat-messages { flex: 1; overflow-y: auto; padding: 12px; display: flex; flex-direction: column; gap: 10px; }
            .bubble { max-width: 80%; padding: 9px 11px; border-radius: 12px; font-size: 13px; white-space: pre-wrap; line-height: 1.45; }
            .bubble.user { align-self: flex-end; background: var(--accent); border-bottom-right-radius: 2px; }
            .bubble.assistant { align-self: flex-start; background: rgba(148,163,184,0.12); border-top-left-radius: 2px; }
            .sources { margin-top: 6px; padding-top: 4px; border-top: 1px solid rgba(148,163,184,0.3); font-size: 11px; }
            .sources a { display: block; color: #a5b4fc; text-decoration: none; white-space: nowrap; overflow: hidden; text-overflow: ellipsis; }
            .sources a:hover { text-decoration: underline; }
            .typing { color: var(--muted); font-style: italic; }
            .chat-form { display: flex; gap: 8px; padding: 10px; border-top: 1px solid rgba(148,163,184,0.2); }
            .chat-form input { border-radius: 999px; }
        </style>
    </head>
    <body>
        <div class="shell">
            <main class="card">
                <div class="header">
                    <div class="title">__APP_NAME__</div>
                    <div class="subtitle">Smart Career Path Prediction</div>
                </div>
                <p class="intro">
                    Upload your <strong>resume</strong> or list your skills, and let our engine predict your ideal career trajectory.
                </p>

                <form id="analyzeForm">
                    <label class="field" for="skills">Key Skills (Optional)</label>
                    <textarea id="skills" name="skills" rows="3" placeholder="E.g., Python, SQL, AWS, React, Project Management..."></textarea>

                    <div class="divider">OR UPLOAD PROFILE</div>

                    <div class="upload-zone">
                        <label class="field" style="margin: 0;">Upload Resume (.pdf file)</label>
                        <div class="file-input">
                            <button class="btn" type="button" id="fileCta">Click to Select File</button>
                            <input type="file" id="resumeFile" name="resume_file" accept=".pdf" />
                        </div>
                        <div class="file-name" id="fileName">No file selected.</div>
                        <button type="button" class="btn-link" id="removeFile" style="display: none;">Remove File</button>
                        <div class="hint">We recommend PDF format for full resume analysis.</div>
                    </div>

                    <button type="submit" class="btn btn-primary submit" id="analyzeBtn">Predict My Career Path</button>
                </form>

                <div class="error-box" id="errorBox"></div>

                <section class="results" id="results">
                    <h2>Your Recommended Roles</h2>
                    <div id="roleList"></div>
                    <div class="summary"><strong>Input Analyzed:</strong> <span id="skillsUsed"></span></div>
                </section>
            </main>
        </div>

        <button class="btn btn-primary chat-launcher" id="chatOpen" title="Open Career Assistant">&#128172;</button>
        <div class="chat-window" id="chatWindow">
            <div class="chat-header">
                <span>Career Assistant</span>
                <button class="btn-link" id="chatClose" style="color: var(--text); font-size: 18px;">&times;</button>
            </div>
            <div class="chat-messages" id="chatMessages"></div>
            <form class="chat-form" id="chatForm">
                <input type="text" id="chatInput" placeholder="Ask a career question..." autocomplete="off" />
                <button type="submit" class="btn btn-primary" id="chatSend" disabled>Send</button>
            </form>
        </div>

        <script>
            const analyzeForm = document.getElementById("analyzeForm");
            const skillsEl = document.getElementById("skills");
            const resumeFile = document.getElementById("resumeFile");
            const fileCta = document.getElementById("fileCta");
            const fileName = document.getElementById("fileName");
            const removeFile = document.getElementById("removeFile");
            const analyzeBtn = document.getElementById("analyzeBtn");
            const errorBox = document.getElementById("errorBox");
            const results = document.getElementById("results");
            const roleList = document.getElementById("roleList");
            const skillsUsed = document.getElementById("skillsUsed");

            const chatOpen = document.getElementById("chatOpen");
            const chatClose = document.getElementById("chatClose");
            const chatWindow = document.getElementById("chatWindow");
            const chatMessages = document.getElementById("chatMessages");
            const chatForm = document.getElementById("chatForm");
            const chatInput = document.getElementById("chatInput");
            const chatSend = document.getElementById("chatSend");

            let chatPending = false;

            const showError = (msg) => {
                errorBox.textContent = msg ? "Error: " + msg : "";
                errorBox.style.display = msg ? "block" : "none";
            };

            const updateFileLabel = () => {
                const file = resumeFile.files[0];
                fileName.textContent = file ? file.name : "No file selected.";
                fileCta.textContent = file ? "File Selected" : "Click to Select File";
                removeFile.style.display = file ? "inline" : "none";
            };

            const setAnalyzing = (busy) => {
                analyzeBtn.disabled = busy;
                skillsEl.disabled = busy;
                resumeFile.disabled = busy;
                analyzeBtn.textContent = busy ? "Analyzing..." : "Predict My Career Path";
            };

            const renderRecommendations = (result) => {
                roleList.innerHTML = "";
                if (!result || !result.labels.length) {
                    results.style.display = "none";
                    return;
                }
                result.labels.forEach((label) => {
                    const dot = label.indexOf(".");
                    const item = document.createElement("div");
                    item.className = "list-item";
                    const rank = document.createElement("span");
                    rank.className = "rank";
                    rank.textContent = label.substring(0, dot);
                    const title = document.createElement("span");
                    title.textContent = label.substring(dot + 2);
                    item.appendChild(rank);
                    item.appendChild(title);
                    roleList.appendChild(item);
                });
                skillsUsed.textContent = result.combined_skills_summary;
                results.style.display = "block";
            };

            resumeFile.addEventListener("change", updateFileLabel);
            removeFile.addEventListener("click", () => {
                resumeFile.value = "";
                updateFileLabel();
            });

            analyzeForm.addEventListener("submit", async (e) => {
                e.preventDefault();
                showError(null);
                renderRecommendations(null);
                const file = resumeFile.files[0];
                if (!skillsEl.value.trim() && !file) {
                    showError("Please enter skills or select a file to begin the analysis.");
                    return;
                }
                const formData = new FormData();
                formData.append("skills", skillsEl.value);
                if (file) {
                    formData.append("resume_file", file);
                }
                setAnalyzing(true);
                try {
                    const res = await fetch("/api/recommendations", { method: "POST", body: formData });
                    const data = await res.json();
                    if (!res.ok) {
                        showError(data.error || "Analysis failed.");
                        return;
                    }
                    renderRecommendations(data.result);
                } catch (err) {
                    console.error("Processing error:", err);
                    showError("An error occurred during the simulated analysis.");
                } finally {
                    setAnalyzing(false);
                }
            });

            const bubbleFor = (turn) => {
                const bubble = document.createElement("div");
                bubble.className = "bubble " + turn.role;
                const text = document.createElement("div");
                text.textContent = turn.text;
                bubble.appendChild(text);
                if (turn.sources && turn.sources.length) {
                    const sources = document.createElement("div");
                    sources.className = "sources";
                    const head = document.createElement("strong");
                    head.textContent = "Sources:";
                    sources.appendChild(head);
                    turn.sources.forEach((s, i) => {
                        const a = document.createElement("a");
                        a.href = s.uri;
                        a.target = "_blank";
                        a.rel = "noopener noreferrer";
                        a.textContent = "[" + (i + 1) + "] " + s.title;
                        sources.appendChild(a);
                    });
                    bubble.appendChild(sources);
                }
                return bubble;
            };

            const renderChat = (turns, pending) => {
                chatMessages.innerHTML = "";
                turns.forEach((t) => chatMessages.appendChild(bubbleFor(t)));
                if (pending) {
                    const typing = document.createElement("div");
                    typing.className = "bubble assistant typing";
                    typing.textContent = "Typing...";
                    chatMessages.appendChild(typing);
                }
                chatMessages.scrollTop = chatMessages.scrollHeight;
            };

            let chatTurns = [];

            const setChatPending = (pending) => {
                chatPending = pending;
                chatInput.disabled = pending;
                chatSend.disabled = pending || !chatInput.value.trim();
            };

            const loadChat = async () => {
                try {
                    const res = await fetch("/api/chat");
                    const data = await res.json();
                    chatTurns = data.turns;
                    setChatPending(data.pending);
                    renderChat(chatTurns, data.pending);
                } catch (err) {
                    console.error("Failed to load chat:", err);
                    setChatPending(false);
                }
            };

            chatOpen.addEventListener("click", () => {
                chatWindow.classList.add("open");
                chatOpen.style.display = "none";
                loadChat();
            });
            chatClose.addEventListener("click", () => {
                chatWindow.classList.remove("open");
                chatOpen.style.display = "block";
            });
            chatInput.addEventListener("input", () => setChatPending(chatPending));

            chatForm.addEventListener("submit", async (e) => {
                e.preventDefault();
                const message = chatInput.value.trim();
                if (!message || chatPending) return;
                chatTurns = chatTurns.concat([{ role: "user", text: message, sources: [] }]);
                chatInput.value = "";
                setChatPending(true);
                renderChat(chatTurns, true);
                try {
                    const res = await fetch("/api/chat", {
                        method: "POST",
                        headers: { "Content-Type": "application/json" },
                        body: JSON.stringify({ message })
                    });
                    const data = await res.json();
                    if (!res.ok) {
                        // server state (including a reply still in flight) wins
                        await loadChat();
                        return;
                    }
                    chatTurns = data.turns;
                    setChatPending(data.pending);
                    renderChat(chatTurns, data.pending);
                } catch (err) {
                    console.error("Chat error:", err);
                    await loadChat();
                }
            });
        </script>
    </body>
    </html>
"""


def render_dashboard(settings: Settings) -> str:
    return _TEMPLATE.replace("__APP_NAME__", escape(settings.app_name))
