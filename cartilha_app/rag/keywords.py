"""Extração de palavras-chave de mensagens do chat."""

from __future__ import annotations

from cartilha_app.core.text import normalize, strip_accents

_PORTUGUESE_STOPWORDS = """
a o e é de da do em um uma para com não os as dos das no na por mais como mas
ao ele ela entre depois sem mesmo aos seus quem nas me esse eles você essa num
nem suas meu minha numa pelos elas qual lhe deles essas esses pelas este dele
tu te vocês vos lhes meus minhas teu tua teus tuas nosso nossa nossos nossas
dela delas esta estes estas aquele aquela aqueles aquelas isto aquilo estou
está estamos estão estive esteve estivemos estiveram estava estávamos estavam
estivera estivéramos esteja estejamos estejam estivesse estivéssemos
estivessem estiver estivermos estiverem hei há havemos hão houve houvemos
houveram havia havíamos haviam houvera houvéramos haja hajamos hajam houvesse
houvéssemos houvessem houver houvermos houverem houverei houverá houveremos
houverão houveria houveríamos houveriam sou somos são era éramos eram fui foi
fomos foram fora fôramos seja sejamos sejam fosse fôssemos fossem for formos
forem serei será seremos serão seria seríamos seriam tenho tem temos têm tinha
tínhamos tinham tive teve tivemos tiveram tivera tivéramos tenha tenhamos
tenham tivesse tivéssemos tivessem tiver tivermos tiverem terei terá teremos
terão teria teríamos teriam que se quando muito nos já eu também só pelo pela
até isso ter posso pode podem podemos quais onde porque sobre
"""

STOPWORDS: frozenset[str] = frozenset(
    strip_accents(word) for word in _PORTUGUESE_STOPWORDS.split()
)


def extract_keywords(message: str) -> list[str]:
    """Palavras relevantes da mensagem, sem repetição e na ordem de aparição."""

    keywords: list[str] = []
    seen: set[str] = set()
    for token in normalize(message):
        if token in STOPWORDS or token in seen:
            continue
        seen.add(token)
        keywords.append(token)
    return keywords
