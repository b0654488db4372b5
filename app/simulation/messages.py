"""
simulation/messages.py

User-facing message catalogue for net-building, solving and port analysis.

Messages are keyed by ErrorCategory value and locale. Unknown locales fall
back to English.
"""

FALLBACK_LOCALE = "en"

CATALOGUE: dict[str, dict[str, str]] = {
    "en": {
        "no_elements": "There are no elements yet. Place an R/V/I/GND first and try again.",
        "no_ground": "Missing GND: place a ground (GND) reference first.",
        "only_ground": (
            "Only GND is present (or every terminal merged into GND). "
            "Place elements and wire them up, then solve again."
        ),
        "no_nodes": "No nodes in net.",
        "missing_ground_net": "Singular matrix: the ground (GND) reference may be missing.",
        "singular_matrix": (
            "Singular matrix: ground may be missing, a node may be floating, "
            "or ideal voltage source constraints conflict."
        ),
        "non_finite": (
            "The solution is not finite (possibly a 0 Ω / 0 H / 0 F element "
            "or a short-circuit model problem at ω = 0)."
        ),
        "port_not_selected": "Select both port nodes A and B before analysing the port.",
        "unknown_port_node": "Port node {node!r} is not a node of this circuit.",
        "unknown_load": "Load element {element!r} is not part of this circuit.",
        "vth_failed": "Vth solve failed: {error}",
        "zth_failed": "Zth solve failed: {error}",
        "pmax_not_applicable": (
            "Re(Zth) ≤ 0: the maximum power formula does not apply "
            "(the port is not passive/realizable)."
        ),
        "step_intro": "Step 1 | Reference and unknowns",
        "step_elements": "Step 2 | Elements as impedances, admittances and sources",
        "step_kcl": "Step 3 | KCL at every non-ground node",
        "step_kcl_note": "These are the exact node equations MNA solves (identical to the matrix rows).",
        "step_kvl": "Step 4 | KVL constraint for every voltage source",
        "step_kvl_note": "Each independent voltage source adds a Va − Vb = V row and one branch-current unknown.",
        "step_matrix": "Step 5 | Matrix form Ax = z",
        "step_solve": "Step 6 | Solve for the unknowns",
        "step_solve_note": "Gaussian elimination with partial pivoting gives x (node voltages and source currents).",
        "none": "(none)",
        "port_step_definition": "Step 0 | Port definition",
        "port_load_removed": "(load element {element} temporarily removed)",
        "port_step_vth": "Step 1 | Vth (open-circuit port voltage)",
        "port_step_zth": "Step 2 | Zth (sources off + test source)",
        "port_sources_off": "Independent sources off: V → 0 (short), I → 0 (open)",
        "port_test_source": "Test source I_TEST = 1 A injected b→a to match the solver direction convention",
        "port_step_norton": "Step 3 | Norton equivalent",
        "port_step_pmax": "Step 4 | Maximum average power transfer (AC)",
    },
    "zh-TW": {
        "no_elements": "目前沒有任何元件。先放一個 R/V/I/GND 再試。",
        "no_ground": "缺少 GND：請先放置接地（GND）。",
        "only_ground": "目前只有 GND（或所有端點都被合併到 GND）。請放元件並接線後再 Solve。",
        "no_nodes": "電路網中沒有節點。",
        "missing_ground_net": "奇異矩陣：可能缺少接地（GND）。",
        "singular_matrix": "奇異矩陣：可能缺少接地、浮接節點，或理想電壓源約束互相衝突。",
        "non_finite": "求解結果非有限值（可能有 0Ω / 0H / 0F 或 ω=0 的短路模型問題）。",
        "port_not_selected": "需要先求解，並用量測工具選好 A/B 兩點。",
        "unknown_port_node": "端口節點 {node!r} 不在此電路中。",
        "unknown_load": "負載元件 {element!r} 不在此電路中。",
        "vth_failed": "Vth 求解失敗：{error}",
        "zth_failed": "Zth 求解失敗：{error}",
        "pmax_not_applicable": "Re(Zth) ≤ 0，無法使用最大功率公式（或端口不是被動可實現）。",
        "step_intro": "Step 1｜建立參考點與未知量",
        "step_elements": "Step 2｜把元件轉成方程（阻抗/導納/源）",
        "step_kcl": "Step 3｜列出每個非接地節點的 KCL 方程",
        "step_kcl_note": "以下方程是 MNA 實際求解的節點方程（與程式矩陣完全一致）。",
        "step_kvl": "Step 4｜列出每個電壓源的 KVL 約束方程",
        "step_kvl_note": "每個獨立電壓源會新增一條 Va−Vb=V 的約束式，並引入一個電壓源電流未知量。",
        "step_matrix": "Step 5｜整理成矩陣形式 Ax = z",
        "step_solve": "Step 6｜解線性方程得到未知量",
        "step_solve_note": "用高斯消去法解出 x（節點電壓與電壓源電流）。",
        "none": "（無）",
        "port_step_definition": "【Step 0｜端口定義】",
        "port_load_removed": "（已暫時移除負載元件：{element}）",
        "port_step_vth": "【Step 1｜Vth（開路端電壓）】",
        "port_step_zth": "【Step 2｜Zth（關源 + 測試源法）】",
        "port_sources_off": "關掉獨立源：獨立電壓源 V→0（短路）、獨立電流源 I→0（開路）",
        "port_test_source": "加入測試電流源：I_TEST 設為 b→a = 1A（用來對齊 solver 的方向慣例）",
        "port_step_norton": "【Step 3｜Norton 等效】",
        "port_step_pmax": "【Step 4｜最大平均功率傳輸（AC）】",
    },
}


def available_locales() -> list[str]:
    return sorted(CATALOGUE)


def message(key: str, locale: str = FALLBACK_LOCALE, **kwargs) -> str:
    """Look up a message and fill in its placeholders.

    Raises:
        KeyError: If the key is unknown in the fallback catalogue too.
    """
    table = CATALOGUE.get(locale, CATALOGUE[FALLBACK_LOCALE])
    template = table.get(key) or CATALOGUE[FALLBACK_LOCALE][key]
    return template.format(**kwargs) if kwargs else template
