"""
JavaScript Evaluators - Code snippets for Playwright page.evaluate().

All snippets share a window-side registry (``window.__stackcheck``) that
gives every node a stable integer key, remembers original inline values of
the properties the override layer touches, and tracks synthetic nodes
created by remediation. Nothing is written into document attributes.

All functions return plain objects suitable for JSON (no DOM nodes).
"""

import json

from ..analyzers.dom_snapshot import SKIPPED_TAGS
from ..analyzers.interactive_detector import InteractiveDetector


_HELPERS = r"""
    const sc = window.__stackcheck || (window.__stackcheck = {
        nodes: [],
        keys: new Map(),
        originals: new Map(),
        synthetic: new Set(),
        clones: new Set(),
    });
    const RULES = __INTERACTIVE_RULES__;
    const SKIPPED = __SKIPPED_TAGS__;
    const MANAGED = ['z-index', 'position', 'pointer-events'];

    const keyOf = (node) => {
        if (!sc.keys.has(node)) {
            sc.keys.set(node, sc.nodes.length);
            sc.nodes.push(node);
        }
        return sc.keys.get(node);
    };

    const nodeOf = (key) => {
        const node = sc.nodes[key];
        if (!node || !node.isConnected) {
            throw new Error('stackcheck: element ' + key + ' is detached');
        }
        return node;
    };

    const classesOf = (el) => {
        // SVG elements expose className as SVGAnimatedString
        let className = '';
        if (typeof el.className === 'string') {
            className = el.className;
        } else if (el.className && typeof el.className.baseVal === 'string') {
            className = el.className.baseVal;
        }
        return className ? className.split(/\s+/).filter(c => c) : [];
    };

    const isSynthetic = (el) => {
        for (let node = el; node; node = node.parentElement) {
            if (sc.synthetic.has(node)) return true;
        }
        return false;
    };

    const isInteractive = (el) => {
        if (sc.clones.has(el)) return true;
        if (el.hasAttribute('disabled')) return false;
        const tag = el.tagName.toLowerCase();
        const hasHandler = RULES.attrs.some(a => el.hasAttribute(a));
        if (RULES.tags.includes(tag)) {
            if (tag === 'a' && !el.getAttribute('href')) return hasHandler;
            if (tag === 'input' && (el.getAttribute('type') || 'text').toLowerCase() === 'hidden') return false;
            return true;
        }
        if (hasHandler) return true;
        const role = (el.getAttribute('role') || '').trim().toLowerCase();
        if (RULES.roles.includes(role)) return true;
        const tabindex = el.getAttribute('tabindex');
        if (tabindex !== null && /^\s*[+-]?\d+\s*$/.test(tabindex) && parseInt(tabindex, 10) >= 0) return true;
        if (classesOf(el).some(c => RULES.pointerClasses.includes(c))) return true;
        return (el.getAttribute('contenteditable') || '').toLowerCase() === 'true';
    };

    const selectorOf = (el) => {
        if (el.id) return '#' + el.id;
        let selector = el.tagName.toLowerCase();
        const safe = classesOf(el).filter(c => !/[:\[\]()\/\\@#!$%^&*+={}'"<>,.]/.test(c));
        if (safe.length) selector += '.' + safe.slice(0, 3).join('.');
        const parent = el.parentElement;
        if (parent) {
            const same = Array.from(parent.children).filter(s => s.tagName === el.tagName);
            if (same.length > 1) selector += ':nth-of-type(' + (same.indexOf(el) + 1) + ')';
        }
        return selector;
    };

    const describe = (el) => {
        const parent = el.parentElement;
        const role = el.getAttribute('role');
        const topLevel = !parent || parent === document.body || parent === document.documentElement;
        return {
            key: keyOf(el),
            tag: el.tagName.toLowerCase(),
            id: el.id || null,
            classes: classesOf(el),
            role: role ? role.trim().toLowerCase() : null,
            interactive: isInteractive(el),
            parentKey: topLevel ? null : keyOf(parent),
            synthetic: isSynthetic(el),
            selector: selectorOf(el),
        };
    };

    const inlineOf = (el) => {
        const values = {};
        for (const prop of MANAGED) {
            values[prop] = [el.style.getPropertyValue(prop), el.style.getPropertyPriority(prop)];
        }
        return values;
    };

    const applyInline = (el, values) => {
        for (const prop of MANAGED) {
            const [value, priority] = values[prop];
            if (value) {
                el.style.setProperty(prop, value, priority);
            } else {
                el.style.removeProperty(prop);
            }
        }
    };

    const clearAll = () => {
        for (const [el, saved] of sc.originals) applyInline(el, saved);
        sc.originals.clear();
    };
"""


def _function(signature: str, body: str) -> str:
    return f"{signature} => {{\n{_HELPERS}\n{body}\n}}"


class JSEvaluators:
    """
    JavaScript code snippets for browser evaluation.

    Instances bake the interactive-detection tables into the helpers so the
    browser classifies controls exactly like InteractiveDetector.
    """

    def __init__(self, detector: InteractiveDetector = None):
        detector = detector or InteractiveDetector()
        self._helpers_config = {
            "__INTERACTIVE_RULES__": json.dumps(detector.to_js_config()),
            "__SKIPPED_TAGS__": json.dumps(sorted(SKIPPED_TAGS)),
        }

        self.ELEMENTS = self._build("()", r"""
            if (!document.body) return null;
            const out = [];
            for (const el of document.body.querySelectorAll('*')) {
                let skipped = false;
                for (let node = el; node && node !== document.body; node = node.parentElement) {
                    if (SKIPPED.includes(node.tagName.toLowerCase())) { skipped = true; break; }
                }
                if (skipped || isSynthetic(el)) continue;
                out.push(describe(el));
            }
            return out;
        """)

        self.GEOMETRY = self._build("(key)", r"""
            const el = nodeOf(key);
            const rect = el.getBoundingClientRect();
            const style = window.getComputedStyle(el);
            return {
                rect: { x: rect.x, y: rect.y, width: rect.width, height: rect.height },
                zIndex: style.zIndex === 'auto' ? null : parseInt(style.zIndex, 10),
                position: style.position,
                pointerEvents: style.pointerEvents,
            };
        """)

        self.ELEMENTS_AT_POINT = self._build("({x, y})", r"""
            return document.elementsFromPoint(x, y).map(describe);
        """)

        self.CONTAINS = self._build("({ancestor, node})", r"""
            const a = nodeOf(ancestor);
            const n = nodeOf(node);
            return a !== n && a.contains(n);
        """)

        self.SNAPSHOT_OVERRIDES = self._build("()", r"""
            const entries = [];
            for (const [el, saved] of sc.originals) {
                entries.push({ key: keyOf(el), saved: saved, current: inlineOf(el) });
            }
            return entries;
        """)

        self.CLEAR_OVERRIDES = self._build("()", r"""
            clearAll();
            return true;
        """)

        # Resolve every target before writing so a detached node leaves the batch untouched
        self.WRITE_OVERRIDES = self._build("(entries)", r"""
            const targets = entries.map(e => nodeOf(e.key));
            entries.forEach((e, i) => {
                const el = targets[i];
                if (!sc.originals.has(el)) sc.originals.set(el, inlineOf(el));
                if (e.zIndex !== null && e.zIndex !== undefined) {
                    el.style.setProperty('z-index', String(e.zIndex), 'important');
                }
                if (e.pointerEvents) {
                    el.style.setProperty('pointer-events', e.pointerEvents, 'important');
                }
                if (e.ensurePositioned && window.getComputedStyle(el).position === 'static') {
                    el.style.setProperty('position', 'relative', 'important');
                }
            });
            return entries.length;
        """)

        self.RESTORE_OVERRIDES = self._build("(entries)", r"""
            clearAll();
            for (const e of entries) {
                const el = sc.nodes[e.key];
                if (!el) continue;
                sc.originals.set(el, e.saved);
                applyInline(el, e.current);
            }
            return true;
        """)

        self.CREATE_PANEL = self._build("(spec)", r"""
            if (!document.body) throw new Error('stackcheck: document has no body');
            const existing = document.getElementById(spec.panelId);
            if (existing) {
                if (!sc.synthetic.has(existing)) return { conflict: true };
                existing.querySelectorAll('*').forEach(n => { sc.synthetic.delete(n); sc.clones.delete(n); });
                sc.synthetic.delete(existing);
                existing.remove();
            }
            const panel = document.createElement('div');
            panel.id = spec.panelId;
            panel.setAttribute('role', 'group');
            panel.setAttribute('aria-label', 'Remediated controls');
            const s = panel.style;
            s.setProperty('position', 'fixed', 'important');
            s.setProperty('top', spec.top + 'px', 'important');
            s.setProperty('right', spec.right + 'px', 'important');
            s.setProperty('z-index', String(spec.zIndex), 'important');
            s.setProperty('pointer-events', 'auto', 'important');
            s.setProperty('display', 'flex', 'important');
            s.setProperty('flex-direction', 'column', 'important');
            s.setProperty('gap', '8px');
            s.setProperty('max-width', '40vw');
            document.body.appendChild(panel);
            sc.synthetic.add(panel);
            return { conflict: false, element: describe(panel) };
        """)

        self.REMOVE_PANEL = self._build("(panelId)", r"""
            const panel = document.getElementById(panelId);
            if (!panel || !sc.synthetic.has(panel)) return false;
            panel.querySelectorAll('*').forEach(n => { sc.synthetic.delete(n); sc.clones.delete(n); });
            sc.synthetic.delete(panel);
            panel.remove();
            return true;
        """)

        # The clone forwards activation to the original instead of copying handlers
        self.CLONE_INTO = self._build("({key, panelKey})", r"""
            const original = nodeOf(key);
            const panel = nodeOf(panelKey);
            const clone = original.cloneNode(true);
            const strip = (el) => {
                for (const attr of Array.from(el.attributes)) {
                    if (attr.name.toLowerCase().startsWith('on')) el.removeAttribute(attr.name);
                }
            };
            strip(clone);
            clone.querySelectorAll('*').forEach(strip);
            clone.querySelectorAll('[id]').forEach(el => el.removeAttribute('id'));
            if (original.id) {
                clone.id = original.id + '--remediated';
            } else {
                clone.removeAttribute('id');
            }
            const reset = [
                ['position', 'relative'], ['top', 'auto'], ['left', 'auto'],
                ['right', 'auto'], ['bottom', 'auto'], ['transform', 'none'],
                ['margin', '0'], ['z-index', 'auto'], ['pointer-events', 'auto'],
                ['visibility', 'visible'], ['opacity', '1'],
            ];
            for (const [prop, value] of reset) clone.style.setProperty(prop, value, 'important');
            clone.addEventListener('click', (event) => {
                event.preventDefault();
                event.stopPropagation();
                original.click();
            });
            panel.appendChild(clone);
            sc.clones.add(clone);
            return describe(clone);
        """)

    VIEWPORT = """
    () => ({
        width: window.innerWidth,
        height: window.innerHeight,
        scrollX: window.scrollX,
        scrollY: window.scrollY,
    })
    """

    NEXT_FRAME = """
    () => new Promise(resolve => requestAnimationFrame(() => requestAnimationFrame(() => resolve(true))))
    """

    def _build(self, signature: str, body: str) -> str:
        script = _function(signature, body)
        for placeholder, value in self._helpers_config.items():
            script = script.replace(placeholder, value)
        return script
