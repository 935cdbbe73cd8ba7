"""Overlay (modal) registry for interactive list items.

Compositors register modals while they walk a document; the composite renderer
asks for the accumulated markup, CSS and the fixed client script once the pass
is done. A registry belongs to exactly one render pass.
"""

from __future__ import annotations

from html import escape
from typing import Iterator

from ..models import Modal
from ..theme import Palette

# Event delegation keyed on data-* attributes written by the node compositor:
#   data-interactive, data-url, data-modal, data-modal-on
# A URL always wins over a click modal. At most one click modal is open.
OVERLAY_SCRIPT = """(function(){
var activeClickModal=null;
function place(modal,evt){
  var root=evt.target&&evt.target.closest?evt.target.closest('svg'):null;
  var box=root?root.getBoundingClientRect():{left:0,top:0};
  modal.style.left=(evt.clientX-box.left+20)+'px';
  modal.style.top=(evt.clientY-box.top)+'px';
}
function showModal(id,evt){var m=document.getElementById(id);if(!m)return;place(m,evt);m.classList.add('visible');}
function hideModal(id){var m=document.getElementById(id);if(m)m.classList.remove('visible');}
function toggleModal(id,evt){
  if(activeClickModal&&activeClickModal!==id){hideModal(activeClickModal);activeClickModal=null;}
  var m=document.getElementById(id);if(!m)return;
  if(m.classList.contains('visible')){hideModal(id);activeClickModal=null;}
  else{showModal(id,evt);activeClickModal=id;}
}
function itemOf(evt){return evt.target&&evt.target.closest?evt.target.closest('[data-interactive]'):null;}
document.addEventListener('mouseover',function(evt){
  var el=itemOf(evt);
  if(!el||el.getAttribute('data-modal-on')!=='hover')return;
  if(evt.relatedTarget&&el.contains(evt.relatedTarget))return;
  showModal(el.getAttribute('data-modal'),evt);
});
document.addEventListener('mouseout',function(evt){
  var el=itemOf(evt);
  if(!el||el.getAttribute('data-modal-on')!=='hover')return;
  if(evt.relatedTarget&&el.contains(evt.relatedTarget))return;
  hideModal(el.getAttribute('data-modal'));
});
document.addEventListener('click',function(evt){
  var el=itemOf(evt);
  if(el){
    var url=el.getAttribute('data-url');
    var modal=el.getAttribute('data-modal-on')==='click'?el.getAttribute('data-modal'):null;
    if(url){evt.stopPropagation();window.open(url,'_blank');return;}
    if(modal){evt.stopPropagation();toggleModal(modal,evt);return;}
  }
  if(activeClickModal){
    var open=document.getElementById(activeClickModal);
    if(open&&!open.contains(evt.target)){hideModal(activeClickModal);activeClickModal=null;}
  }
});
})();"""


def modal_dom_id(key: str) -> str:
    return f"modal-{key}"


class OverlayRegistry:
    """Pass-scoped collection of modals keyed ``{element}-{section}-{value}``."""

    def __init__(self) -> None:
        self._modals: dict[str, Modal] = {}

    def register(self, key: str, modal: Modal) -> str:
        """Record ``modal`` under ``key`` and return its DOM id."""
        self._modals[key] = modal
        return modal_dom_id(key)

    def get(self, key: str) -> Modal | None:
        return self._modals.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._modals

    def __len__(self) -> int:
        return len(self._modals)

    def __iter__(self) -> Iterator[tuple[str, Modal]]:
        return iter(self._modals.items())

    def markup(self) -> str:
        parts: list[str] = []
        for key, modal in self._modals.items():
            subtitle = f"<p>{escape(modal.subtitle)}</p>" if modal.subtitle else ""
            parts.append(
                f'<div id="{escape(modal_dom_id(key), quote=True)}" class="modal" data-trigger="{modal.on}">'
                f'<div class="modal-header"><h4>{escape(modal.title)}</h4>{subtitle}</div>'
                f'<div class="modal-content">{modal.html_content}</div>'
                "</div>"
            )
        return "".join(parts)

    @staticmethod
    def css(palette: Palette) -> str:
        return (
            ".modal{position:fixed;visibility:hidden;opacity:0;"
            "transition:opacity .2s ease-in-out,visibility .2s;"
            f"background-color:{palette['modalBg']};border:1px solid {palette['border']};"
            f"border-radius:8px;box-shadow:0 4px 12px {palette['modalShadow']};"
            "padding:16px;z-index:100;max-width:350px;pointer-events:none}"
            ".modal.visible{visibility:visible;opacity:1;pointer-events:auto}"
            f".modal-header h4{{margin:0 0 5px 0;font-size:16px;color:{palette['text']}}}"
            f".modal-header p{{margin:0 0 10px 0;font-size:12px;color:{palette['textFaded']}}}"
            f".modal-content{{font-size:14px;color:{palette['text']}}}"
        )

    @staticmethod
    def script() -> str:
        return OVERLAY_SCRIPT
