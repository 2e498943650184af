"""HTML pages served by the application."""
from __future__ import annotations

from datetime import datetime

_BASE_STYLE = """
        :root {
            --bg-gradient: linear-gradient(135deg, #eef4fb 0%, #f7f9fd 45%, #ffffff 100%);
            --card-bg: #ffffff;
            --border-color: #e1e7f0;
            --primary: #135ee2;
            --primary-dark: #0b46ad;
            --green: #00c853;
            --red: #ff3b30;
            --yellow: #ffb800;
            --text-color: #1f2937;
            --muted: #6b7280;
            --shadow: 0 20px 40px rgba(15, 23, 42, 0.12);
            --radius-lg: 18px;
            --radius-md: 12px;
        }

        * { box-sizing: border-box; }

        body {
            margin: 0;
            font-family: 'Inter', -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            background: var(--bg-gradient);
            color: var(--text-color);
            min-height: 100vh;
            display: flex;
            justify-content: center;
            padding: 40px 16px;
        }

        .card {
            background: var(--card-bg);
            border: 1px solid var(--border-color);
            border-radius: var(--radius-lg);
            box-shadow: var(--shadow);
            padding: 28px 32px;
        }

        h1, h2, h3 { color: #0f172a; margin-top: 0; }

        label {
            font-weight: 600;
            display: block;
            margin-bottom: 6px;
        }

        input[type=password],
        input[type=text],
        select,
        textarea {
            width: 100%;
            padding: 10px 12px;
            border: 1px solid var(--border-color);
            border-radius: var(--radius-md);
            background: #f9fbff;
            font-size: 0.95rem;
        }

        textarea { resize: vertical; min-height: 70px; }

        .btn {
            border: none;
            border-radius: var(--radius-md);
            padding: 12px 20px;
            font-weight: 600;
            font-size: 0.95rem;
            cursor: pointer;
            background: var(--primary);
            color: #fff;
        }

        .btn:hover { background: var(--primary-dark); }
        .btn:disabled { opacity: 0.55; cursor: not-allowed; }
        .btn-secondary { background: #e8eefb; color: var(--primary-dark); }
        .btn-secondary:hover { background: #d6e1f7; }

        .error {
            display: none;
            margin-top: 14px;
            padding: 12px 14px;
            border-radius: var(--radius-md);
            background: rgba(255, 59, 48, 0.1);
            color: #b3261e;
        }

        footer { text-align: center; color: var(--muted); font-size: 0.85rem; }
"""


def build_login_page() -> str:
    """Password form for the shared access secret."""

    html = """<!DOCTYPE html>
<html lang="cs">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Přihlášení | Kontrola nemovitostí</title>
    <style>
BASE_STYLE_PLACEHOLDER
        body { align-items: center; }
        .login { width: min(420px, 100%); display: flex; flex-direction: column; gap: 18px; }
        .login form { display: flex; flex-direction: column; gap: 16px; }
        .login p { color: var(--muted); margin: 0; }
    </style>
</head>
<body>
    <div class="login">
        <div class="card">
            <h1>Kontrola nemovitostí</h1>
            <p>Zadejte přístupové heslo.</p>
            <form id="loginForm">
                <div>
                    <label for="password">Heslo</label>
                    <input type="password" id="password" name="password" autocomplete="current-password" required>
                </div>
                <button type="submit" class="btn" id="loginBtn">Přihlásit</button>
            </form>
            <div class="error" id="loginError"></div>
        </div>
        <footer>© YEAR_PLACEHOLDER AI kontrola ocenění nemovitostí</footer>
    </div>
<script>
    const loginForm = document.getElementById("loginForm");
    const loginBtn = document.getElementById("loginBtn");
    const loginError = document.getElementById("loginError");

    loginForm.addEventListener("submit", async (event) => {
        event.preventDefault();
        loginError.style.display = "none";
        loginBtn.disabled = true;
        try {
            const response = await fetch("/api/auth/login", {
                method: "POST",
                headers: { "Content-Type": "application/json" },
                body: JSON.stringify({ password: document.getElementById("password").value }),
            });
            const payload = await response.json().catch(() => ({}));
            if (response.ok && payload.success) {
                window.location.href = "/";
                return;
            }
            loginError.textContent = payload.error || "Přihlášení se nezdařilo";
            loginError.style.display = "block";
        } catch (err) {
            loginError.textContent = "Chyba připojení k serveru";
            loginError.style.display = "block";
        } finally {
            loginBtn.disabled = false;
        }
    });
</script>
</body></html>"""
    return html.replace("BASE_STYLE_PLACEHOLDER", _BASE_STYLE).replace("YEAR_PLACEHOLDER", str(datetime.now().year))


def build_homepage() -> str:
    """Three-step page: upload, analysis, results with manual review and PDF export."""

    html = """<!DOCTYPE html>
<html lang="cs">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Kontrola nemovitostí</title>
    <style>
BASE_STYLE_PLACEHOLDER
        .page {
            width: min(1040px, 100%);
            display: flex;
            flex-direction: column;
            gap: 24px;
        }

        .topbar { display: flex; justify-content: space-between; align-items: center; }
        .topbar p { margin: 4px 0 0; color: var(--muted); }

        .steps { display: flex; gap: 12px; }
        .steps span {
            flex: 1;
            text-align: center;
            padding: 10px;
            border-radius: var(--radius-md);
            background: #e8eefb;
            color: var(--muted);
            font-weight: 600;
        }
        .steps span.active { background: var(--primary); color: #fff; }

        .step { display: none; flex-direction: column; gap: 20px; }
        .step.active { display: flex; }

        .dropzone {
            border: 2px dashed rgba(19, 94, 226, 0.35);
            border-radius: var(--radius-lg);
            padding: 22px;
            background: rgba(19, 94, 226, 0.04);
            cursor: pointer;
            transition: border 0.2s ease, background 0.2s ease;
        }
        .dropzone.drag-active { border-color: var(--primary); background: rgba(19, 94, 226, 0.1); }
        .dropzone small { color: var(--muted); display: block; margin-top: 4px; }
        .dropzone input { display: none; }
        .file-list { margin-top: 10px; display: flex; flex-wrap: wrap; gap: 8px; }
        .file-list span {
            background: #fff;
            border: 1px solid var(--border-color);
            border-radius: 999px;
            padding: 4px 12px;
            font-size: 0.85rem;
        }
        .file-list button { border: none; background: none; color: var(--red); cursor: pointer; }

        .grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(260px, 1fr)); gap: 16px; }

        .spinner {
            width: 48px;
            height: 48px;
            border: 5px solid #e8eefb;
            border-top-color: var(--primary);
            border-radius: 50%;
            animation: spin 1s linear infinite;
            margin: 20px auto;
        }
        @keyframes spin { to { transform: rotate(360deg); } }

        .banner {
            padding: 16px 20px;
            border-radius: var(--radius-md);
            font-weight: 700;
            font-size: 1.1rem;
            border: 2px solid var(--muted);
        }
        .banner.approved { border-color: var(--green); background: rgba(0, 200, 83, 0.12); }
        .banner.rejected { border-color: var(--red); background: rgba(255, 59, 48, 0.12); }
        .banner.manualReview { border-color: var(--yellow); background: rgba(255, 184, 0, 0.15); }

        table { width: 100%; border-collapse: collapse; }
        th, td { text-align: left; padding: 8px 10px; border-bottom: 1px solid var(--border-color); vertical-align: top; }
        th { color: var(--muted); font-weight: 600; font-size: 0.85rem; }

        .dot { display: inline-block; width: 14px; height: 14px; border-radius: 4px; background: #9ca3af; }
        .dot.green { background: var(--green); }
        .dot.red { background: var(--red); }
        .dot.yellow { background: var(--yellow); }

        .issues li { color: #b3261e; margin-bottom: 4px; }
        .actions { display: flex; gap: 12px; flex-wrap: wrap; }
        .saved-note { color: var(--green); font-weight: 600; display: none; }
    </style>
</head>
<body>
    <div class="page">
        <div class="card topbar">
            <div>
                <h1>Kontrola nemovitostí</h1>
                <p>AI kontrola formuláře ocenění rodinného domu oproti fotodokumentaci</p>
            </div>
            <button type="button" class="btn btn-secondary" id="logoutBtn">Odhlásit</button>
        </div>

        <div class="steps">
            <span id="stepLabel1" class="active">1. Nahrání</span>
            <span id="stepLabel2">2. Analýza</span>
            <span id="stepLabel3">3. Výsledky</span>
        </div>

        <section class="step active card" id="step1">
            <h2>Nahrání podkladů</h2>
            <div class="dropzone" id="pdfZone">
                <label>PDF formulář ocenění *</label>
                <small>Jeden soubor PDF, max 10 MB</small>
                <input type="file" id="pdfInput" accept="application/pdf">
                <div class="file-list" id="pdfList"></div>
            </div>
            <div class="dropzone" id="photoZone">
                <label>Fotografie nemovitosti * (min. 8)</label>
                <small>JPG nebo PNG, max 10 MB na soubor, nejvýše 30 fotografií. Exteriér ze všech stran, interiér, číslo popisné.</small>
                <input type="file" id="photoInput" accept="image/jpeg,image/png" multiple>
                <div class="file-list" id="photoList"></div>
            </div>
            <div class="grid">
                <div class="dropzone" id="mapZone">
                    <label>Katastrální mapa (volitelné)</label>
                    <small>JPG nebo PNG</small>
                    <input type="file" id="mapInput" accept="image/jpeg,image/png">
                    <div class="file-list" id="mapList"></div>
                </div>
                <div class="dropzone" id="techZone">
                    <label>Technická dokumentace (volitelné)</label>
                    <small>PDF nebo obrázek</small>
                    <input type="file" id="techInput" accept="application/pdf,image/jpeg,image/png">
                    <div class="file-list" id="techList"></div>
                </div>
            </div>
            <div class="actions">
                <button type="button" class="btn" id="analyzeBtn">Spustit kontrolu</button>
            </div>
            <div class="error" id="uploadError"></div>
        </section>

        <section class="step card" id="step2">
            <h2>Probíhá analýza</h2>
            <div class="spinner"></div>
            <p>AI porovnává údaje z formuláře s fotografiemi. Může to trvat až několik minut.</p>
        </section>

        <section class="step" id="step3">
            <div class="card">
                <div class="banner" id="recommendationBanner"></div>
                <h3 style="margin-top: 20px;">Shrnutí</h3>
                <p id="summaryText"></p>
            </div>
            <div class="card">
                <h3>Extrahované údaje</h3>
                <table id="extractedTable"></table>
            </div>
            <div class="card">
                <h3>Výsledky kontroly polí</h3>
                <table>
                    <thead><tr><th></th><th>Pole</th><th>Hodnota</th><th>Jistota</th><th>Barva</th><th>Poznámka</th></tr></thead>
                    <tbody id="validationBody"></tbody>
                </table>
            </div>
            <div class="grid">
                <div class="card">
                    <h3>Podlahová plocha</h3>
                    <table id="floorAreaTable"></table>
                </div>
                <div class="card" id="cadastralCard">
                    <h3>Katastrální mapa</h3>
                    <table id="cadastralTable"></table>
                </div>
            </div>
            <div class="card" id="issuesCard">
                <h3>Nalezené problémy</h3>
                <ul class="issues" id="issuesList"></ul>
            </div>
            <div class="card">
                <h3>Ruční kontrola</h3>
                <div class="grid">
                    <div>
                        <label for="recommendationSelect">Finální doporučení</label>
                        <select id="recommendationSelect">
                            <option value="approved">Schváleno</option>
                            <option value="manualReview">Manuální kontrola</option>
                            <option value="rejected">Zamítnuto</option>
                        </select>
                    </div>
                    <div>
                        <label for="officerNote">Poznámka bankéře</label>
                        <textarea id="officerNote"></textarea>
                    </div>
                </div>
                <div class="actions" style="margin-top: 16px;">
                    <button type="button" class="btn btn-secondary" id="saveReviewBtn">Uložit úpravy</button>
                    <button type="button" class="btn" id="exportBtn">Stáhnout PDF</button>
                    <button type="button" class="btn btn-secondary" id="newCheckBtn">Nová kontrola</button>
                    <span class="saved-note" id="savedNote">Úpravy uloženy</span>
                </div>
                <div class="error" id="exportError"></div>
            </div>
        </section>

        <footer>© YEAR_PLACEHOLDER AI kontrola ocenění nemovitostí</footer>
    </div>
<script>
    const MAX_FILE_BYTES = 10 * 1024 * 1024;
    const MAX_PHOTOS = 30;
    const MIN_PHOTOS = 8;
    const MAX_SIDE = 1024;
    const JPEG_QUALITY = 0.85;

    const FIELDS = [
        ["propertyCondition", "Stav nemovitosti"],
        ["layout", "Dispozice"],
        ["numberOfFloors", "Počet podlaží"],
        ["hasAttic", "Podkroví"],
        ["atticHabitable", "Obytné podkroví"],
        ["hasBasement", "Sklep"],
        ["roofType", "Typ střechy"],
        ["landArea", "Plocha pozemku"],
        ["builtUpArea", "Zastavěná plocha"],
        ["totalFloorArea", "Celková plocha"],
    ];
    const AREA_FIELDS = ["landArea", "builtUpArea", "totalFloorArea"];
    const RECOMMENDATION_LABELS = {
        approved: "SCHVÁLENO",
        rejected: "ZAMÍTNUTO",
        manualReview: "MANUÁLNÍ KONTROLA",
    };
    const DIRECTION_LABELS = { north: "sever", south: "jih", east: "východ", west: "západ" };

    const state = {
        pdf: null,
        photos: [],
        cadastralMap: null,
        technicalDoc: null,
        results: null,
        manualEdits: null,
        bankOfficerNote: "",
    };

    const uploadError = document.getElementById("uploadError");
    const exportError = document.getElementById("exportError");
    const analyzeBtn = document.getElementById("analyzeBtn");

    function escapeHtml(value) {
        return String(value === undefined || value === null ? "" : value)
            .replace(/&/g, "&amp;")
            .replace(/</g, "&lt;")
            .replace(/>/g, "&gt;")
            .replace(/"/g, "&quot;");
    }

    function showError(element, message) {
        element.textContent = message;
        element.style.display = message ? "block" : "none";
    }

    function showStep(number) {
        [1, 2, 3].forEach((index) => {
            document.getElementById("step" + index).classList.toggle("active", index === number);
            document.getElementById("stepLabel" + index).classList.toggle("active", index === number);
        });
    }

    function stripDataUrl(dataUrl) {
        return dataUrl.substring(dataUrl.indexOf(",") + 1);
    }

    function readAsDataUrl(file) {
        return new Promise((resolve, reject) => {
            const reader = new FileReader();
            reader.onload = () => resolve(reader.result);
            reader.onerror = () => reject(new Error("Soubor " + file.name + " nelze načíst"));
            reader.readAsDataURL(file);
        });
    }

    async function resizeImage(file) {
        const dataUrl = await readAsDataUrl(file);
        const image = await new Promise((resolve, reject) => {
            const img = new Image();
            img.onload = () => resolve(img);
            img.onerror = () => reject(new Error("Obrázek " + file.name + " nelze načíst"));
            img.src = dataUrl;
        });
        const scale = Math.min(1, MAX_SIDE / Math.max(image.width, image.height));
        const canvas = document.createElement("canvas");
        canvas.width = Math.round(image.width * scale);
        canvas.height = Math.round(image.height * scale);
        canvas.getContext("2d").drawImage(image, 0, 0, canvas.width, canvas.height);
        return stripDataUrl(canvas.toDataURL("image/jpeg", JPEG_QUALITY));
    }

    function checkImage(file) {
        if (!["image/jpeg", "image/png"].includes(file.type)) {
            throw new Error("Pouze JPG a PNG formáty jsou povoleny");
        }
        if (file.size > MAX_FILE_BYTES) {
            throw new Error("Soubor je příliš velký (max 10MB)");
        }
    }

    function checkPdf(file) {
        if (file.type !== "application/pdf") {
            throw new Error("Pouze PDF formát je povolen");
        }
        if (file.size > MAX_FILE_BYTES) {
            throw new Error("Soubor je příliš velký (max 10MB)");
        }
    }

    function renderFileList(listId, items, onRemove) {
        const list = document.getElementById(listId);
        list.innerHTML = "";
        items.forEach((item, index) => {
            const chip = document.createElement("span");
            chip.innerHTML = escapeHtml(item.name) + ' <button type="button" title="Odebrat">×</button>';
            chip.querySelector("button").addEventListener("click", (event) => {
                event.stopPropagation();
                onRemove(index);
            });
            list.appendChild(chip);
        });
    }

    function refreshLists() {
        renderFileList("pdfList", state.pdf ? [state.pdf] : [], () => { state.pdf = null; refreshLists(); });
        renderFileList("photoList", state.photos, (index) => { state.photos.splice(index, 1); refreshLists(); });
        renderFileList("mapList", state.cadastralMap ? [state.cadastralMap] : [], () => { state.cadastralMap = null; refreshLists(); });
        renderFileList("techList", state.technicalDoc ? [state.technicalDoc] : [], () => { state.technicalDoc = null; refreshLists(); });
    }

    async function handlePdf(files) {
        const file = files[0];
        checkPdf(file);
        state.pdf = { name: file.name, data: stripDataUrl(await readAsDataUrl(file)) };
    }

    async function handlePhotos(files) {
        if (state.photos.length + files.length > MAX_PHOTOS) {
            throw new Error("Maximální počet souborů je " + MAX_PHOTOS);
        }
        for (const file of files) {
            checkImage(file);
        }
        for (const file of files) {
            state.photos.push({ name: file.name, data: await resizeImage(file) });
        }
    }

    async function handleMap(files) {
        const file = files[0];
        checkImage(file);
        state.cadastralMap = { name: file.name, data: await resizeImage(file) };
    }

    async function handleTechnicalDoc(files) {
        const file = files[0];
        if (file.type === "application/pdf") {
            checkPdf(file);
            state.technicalDoc = { name: file.name, data: stripDataUrl(await readAsDataUrl(file)) };
        } else {
            checkImage(file);
            state.technicalDoc = { name: file.name, data: await resizeImage(file) };
        }
    }

    function bindDropzone(zoneId, inputId, handler) {
        const zone = document.getElementById(zoneId);
        const input = document.getElementById(inputId);
        const accept = async (fileList) => {
            const files = Array.from(fileList || []);
            if (!files.length) { return; }
            showError(uploadError, "");
            try {
                await handler(files);
            } catch (err) {
                showError(uploadError, err.message);
            }
            refreshLists();
            input.value = "";
        };
        zone.addEventListener("click", () => input.click());
        input.addEventListener("change", () => accept(input.files));
        zone.addEventListener("dragover", (event) => { event.preventDefault(); zone.classList.add("drag-active"); });
        zone.addEventListener("dragleave", () => zone.classList.remove("drag-active"));
        zone.addEventListener("drop", (event) => {
            event.preventDefault();
            zone.classList.remove("drag-active");
            accept(event.dataTransfer.files);
        });
    }

    bindDropzone("pdfZone", "pdfInput", handlePdf);
    bindDropzone("photoZone", "photoInput", handlePhotos);
    bindDropzone("mapZone", "mapInput", handleMap);
    bindDropzone("techZone", "techInput", handleTechnicalDoc);

    analyzeBtn.addEventListener("click", async () => {
        showError(uploadError, "");
        if (!state.pdf) {
            showError(uploadError, "PDF formulář je povinný");
            return;
        }
        if (state.photos.length < MIN_PHOTOS) {
            showError(uploadError, "Musí být nahráno minimálně " + MIN_PHOTOS + " fotografií");
            return;
        }
        analyzeBtn.disabled = true;
        showStep(2);
        try {
            const response = await fetch("/api/analyze-property-pdf", {
                method: "POST",
                headers: { "Content-Type": "application/json" },
                body: JSON.stringify({
                    pdfBase64: state.pdf.data,
                    photos: state.photos.map((photo) => photo.data),
                    cadastralMap: state.cadastralMap ? state.cadastralMap.data : undefined,
                    technicalDoc: state.technicalDoc ? state.technicalDoc.data : undefined,
                }),
            });
            const payload = await response.json().catch(() => ({}));
            if (!response.ok || !payload.success) {
                throw new Error(payload.error || "Neznámá chyba při analýze");
            }
            state.results = payload.data;
            state.manualEdits = null;
            state.bankOfficerNote = "";
            renderResults();
            showStep(3);
        } catch (err) {
            showStep(1);
            showError(uploadError, err.message);
        } finally {
            analyzeBtn.disabled = false;
        }
    });

    function formatValue(key, value) {
        if (value === undefined || value === null || value === "") { return "—"; }
        if (typeof value === "boolean") { return value ? "Ano" : "Ne"; }
        if (AREA_FIELDS.includes(key)) { return value + " m²"; }
        return String(value);
    }

    function currentResults() {
        return Object.assign({}, state.results, state.manualEdits || {});
    }

    function renderRows(tableId, rows) {
        document.getElementById(tableId).innerHTML = rows
            .map(([label, value]) => "<tr><th>" + escapeHtml(label) + "</th><td>" + escapeHtml(value) + "</td></tr>")
            .join("");
    }

    function renderResults() {
        const results = currentResults();
        const extracted = results.extractedData || {};
        const address = extracted.address || {};
        const cadastral = extracted.cadastral || {};
        const validation = results.validation || {};

        const banner = document.getElementById("recommendationBanner");
        banner.className = "banner " + (results.recommendation || "");
        banner.textContent = "DOPORUČENÍ: " + (RECOMMENDATION_LABELS[results.recommendation] || "—");
        document.getElementById("summaryText").textContent = results.summary || "";
        document.getElementById("recommendationSelect").value = results.recommendation || "manualReview";
        document.getElementById("officerNote").value = state.bankOfficerNote;

        renderRows("extractedTable", [
            ["Adresa", [address.street, address.houseNumber].filter(Boolean).join(" ") + (address.city ? ", " + address.city : "")],
            ["PSČ", address.zipCode || "—"],
            ["Katastrální území", cadastral.cadastralArea || "—"],
            ["LV", cadastral.landRegistryNumber || "—"],
            ["Obec / okres / kraj", [cadastral.municipality, cadastral.district, cadastral.region].filter(Boolean).join(" / ") || "—"],
            ["Konstrukce", extracted.construction || "—"],
            ["Počet garáží", extracted.garageCount === undefined ? "—" : extracted.garageCount],
        ]);

        document.getElementById("validationBody").innerHTML = FIELDS.map(([key, label]) => {
            const entry = validation[key] || {};
            const value = entry.extractedValue !== undefined ? entry.extractedValue : extracted[key];
            const color = entry.color || "";
            const options = ["green", "yellow", "red"].map((option) =>
                '<option value="' + option + '"' + (option === color ? " selected" : "") + ">" +
                { green: "Zelená", yellow: "Žlutá", red: "Červená" }[option] + "</option>"
            ).join("");
            return '<tr data-field="' + key + '">' +
                '<td><span class="dot ' + escapeHtml(color) + '"></span></td>' +
                "<td>" + escapeHtml(label) + "</td>" +
                "<td>" + escapeHtml(formatValue(key, value)) + "</td>" +
                "<td>" + escapeHtml(entry.confidence || "—") + "</td>" +
                '<td><select class="color-select">' + options + "</select></td>" +
                '<td><input type="text" class="note-input" value="' + escapeHtml(entry.note || "") + '"></td>' +
                "</tr>";
        }).join("");

        document.querySelectorAll("#validationBody .color-select").forEach((select) => {
            select.addEventListener("change", () => {
                const dot = select.closest("tr").querySelector(".dot");
                dot.className = "dot " + select.value;
            });
        });

        const estimate = results.floorAreaEstimate || {};
        renderRows("floorAreaTable", [
            ["Klient uvedl", formatValue("totalFloorArea", extracted.totalFloorArea)],
            ["AI vypočítala", formatValue("totalFloorArea", estimate.calculated)],
            ["Jistota", estimate.confidence === undefined ? "—" : estimate.confidence + " %"],
            ["Metoda", estimate.method || "—"],
            ["Detail", estimate.details || "—"],
        ]);

        const check = results.cadastralMapCheck || {};
        document.getElementById("cadastralCard").style.display = check.available ? "block" : "none";
        const verdict = (value) => value === true ? "souhlasí" : value === false ? "nesouhlasí" : "neověřeno";
        renderRows("cadastralTable", [
            ["Rozloha pozemku", verdict(check.landAreaMatches)],
            ["Umístění stavby", verdict(check.buildingLocationCorrect)],
            ["Poznámka", check.notes || "—"],
        ]);

        const issues = results.issues || {};
        const items = [];
        if (issues.underConstruction) { items.push("Nemovitost je v rekonstrukci"); }
        if (issues.severelyDamaged) { items.push("Výrazné poškození nemovitosti"); }
        if (issues.visibleCracks) { items.push("Viditelné praskliny"); }
        if (issues.facadeDamagePercent > 0) { items.push("Poškození fasády: " + issues.facadeDamagePercent + " %"); }
        if (issues.photosOutdated) { items.push("Fotografie jsou zjevně neaktuální"); }
        const coverage = issues.incompleteExteriorCoverage || {};
        if ((coverage.missingDirections || []).length && coverage.severity !== "complete") {
            items.push("Chybí pohled ze stran: " + coverage.missingDirections.map((d) => DIRECTION_LABELS[d] || d).join(", "));
        }
        (issues.missingPhotos || []).forEach((item) => items.push("Chybí fotografie: " + item));
        document.getElementById("issuesCard").style.display = items.length ? "block" : "none";
        document.getElementById("issuesList").innerHTML = items.map((item) => "<li>" + escapeHtml(item) + "</li>").join("");
    }

    function collectEdits() {
        const results = currentResults();
        const validation = Object.assign({}, results.validation || {});
        document.querySelectorAll("#validationBody tr").forEach((row) => {
            const key = row.dataset.field;
            const color = row.querySelector(".color-select").value;
            validation[key] = Object.assign({}, validation[key] || {}, {
                color: color,
                matches: color === "green",
                note: row.querySelector(".note-input").value,
            });
        });
        return {
            validation: validation,
            recommendation: document.getElementById("recommendationSelect").value,
        };
    }

    document.getElementById("saveReviewBtn").addEventListener("click", () => {
        state.manualEdits = collectEdits();
        state.bankOfficerNote = document.getElementById("officerNote").value;
        renderResults();
        const note = document.getElementById("savedNote");
        note.style.display = "inline";
        setTimeout(() => { note.style.display = "none"; }, 2000);
    });

    document.getElementById("exportBtn").addEventListener("click", async () => {
        showError(exportError, "");
        const button = document.getElementById("exportBtn");
        button.disabled = true;
        try {
            const response = await fetch("/api/generate-pdf", {
                method: "POST",
                headers: { "Content-Type": "application/json" },
                body: JSON.stringify({
                    validationResults: state.results,
                    formData: state.results.extractedData,
                    manualEdits: state.manualEdits,
                    bankOfficerNote: document.getElementById("officerNote").value,
                }),
            });
            if (!response.ok) {
                const payload = await response.json().catch(() => ({}));
                throw new Error(payload.error || "Chyba při generování PDF");
            }
            const disposition = response.headers.get("Content-Disposition") || "";
            const match = disposition.match(/filename="([^"]+)"/);
            const blob = await response.blob();
            const url = URL.createObjectURL(blob);
            const link = document.createElement("a");
            link.href = url;
            link.download = match ? match[1] : "vysledek-kontroly-" + Date.now() + ".pdf";
            document.body.appendChild(link);
            link.click();
            link.remove();
            URL.revokeObjectURL(url);
        } catch (err) {
            showError(exportError, err.message);
        } finally {
            button.disabled = false;
        }
    });

    document.getElementById("newCheckBtn").addEventListener("click", () => {
        state.pdf = null;
        state.photos = [];
        state.cadastralMap = null;
        state.technicalDoc = null;
        state.results = null;
        state.manualEdits = null;
        state.bankOfficerNote = "";
        refreshLists();
        showError(uploadError, "");
        showError(exportError, "");
        showStep(1);
    });

    document.getElementById("logoutBtn").addEventListener("click", async () => {
        await fetch("/api/auth/logout", { method: "POST" }).catch(() => null);
        window.location.href = "/login";
    });
</script>
</body></html>"""
    return html.replace("BASE_STYLE_PLACEHOLDER", _BASE_STYLE).replace("YEAR_PLACEHOLDER", str(datetime.now().year))


__all__ = ["build_homepage", "build_login_page"]
