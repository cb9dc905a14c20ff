"""HoldemTutor message catalogue: teaching-message tags to English / Spanish text."""

from typing import Dict, Optional

from holdemtutor.core.rules import Language, MessageTag

MESSAGES: Dict[Language, Dict[MessageTag, str]] = {
    Language.EN: {
        MessageTag.WELCOME: "Welcome! I'm the Poker Master. Let's play and learn together.",
        MessageTag.STRONG_PRE_FLOP: "I have a strong starting hand. Let's see how this develops.",
        MessageTag.GOOD_HAND: "This is a playable hand. I'll stay in.",
        MessageTag.MEDIUM_HAND: "My hand has potential. I'll play carefully.",
        MessageTag.WEAK_HAND: "This hand is weak. I need to be cautious.",
        MessageTag.STRONG_HAND: "I've made a strong hand! Time to build the pot.",
        MessageTag.CALLING: "The pot odds make this call worthwhile.",
        MessageTag.RAISING: "I'm raising to build the pot and pressure you.",
        MessageTag.BLUFF: "Sometimes you need to take risks. I'm betting big!",
        MessageTag.FOLD: "This hand isn't worth continuing. I fold.",
        MessageTag.POT_ODDS: "The pot odds are good enough to call here.",
        MessageTag.FLOP: "Here comes the flop! These three cards are shared by both players.",
        MessageTag.TURN: "The turn card is revealed. One more card to come!",
        MessageTag.RIVER: "The river - the final card! Last chance to bet.",
        MessageTag.PLAYER_FOLDED: "I win this hand. You folded.",
        MessageTag.TEACHER_FOLDED: "You win! I folded.",
        MessageTag.PLAYER_WINS: "You win with {description}! Well played!",
        MessageTag.TEACHER_WINS: "I win with {description}. Better luck next time!",
        MessageTag.TIE: "It's a tie! We split the pot.",
    },
    Language.ES: {
        MessageTag.WELCOME: "¡Bienvenido! Soy el Maestro del Póker. Juguemos y aprendamos juntos.",
        MessageTag.STRONG_PRE_FLOP: "Tengo una mano inicial fuerte. Veamos cómo se desarrolla.",
        MessageTag.GOOD_HAND: "Esta es una mano jugable. Me quedo.",
        MessageTag.MEDIUM_HAND: "Mi mano tiene potencial. Jugaré con cuidado.",
        MessageTag.WEAK_HAND: "Esta mano es débil. Debo ser cauteloso.",
        MessageTag.STRONG_HAND: "¡He formado una mano fuerte! Hora de construir el bote.",
        MessageTag.CALLING: "Las probabilidades del bote hacen que valga la pena igualar.",
        MessageTag.RAISING: "Estoy subiendo para construir el bote y presionarte.",
        MessageTag.BLUFF: "A veces hay que arriesgarse. ¡Apuesto grande!",
        MessageTag.FOLD: "Esta mano no vale la pena continuar. Me retiro.",
        MessageTag.POT_ODDS: "Las probabilidades del bote son suficientes para igualar aquí.",
        MessageTag.FLOP: "¡Aquí viene el flop! Estas tres cartas son compartidas por ambos jugadores.",
        MessageTag.TURN: "Se revela la carta del turn. ¡Una carta más por venir!",
        MessageTag.RIVER: "El river - ¡la carta final! Última oportunidad para apostar.",
        MessageTag.PLAYER_FOLDED: "Gano esta mano. Te retiraste.",
        MessageTag.TEACHER_FOLDED: "¡Ganaste! Me retiré.",
        MessageTag.PLAYER_WINS: "¡Ganaste con {description}! ¡Bien jugado!",
        MessageTag.TEACHER_WINS: "Gano con {description}. ¡Mejor suerte la próxima vez!",
        MessageTag.TIE: "¡Empate! Dividimos el bote.",
    },
}


def render_message(
    tag: Optional[MessageTag],
    language: Language = Language.EN,
    description: str = "",
) -> Optional[str]:
    """Look up the text for a tag; ``description`` fills in winning-hand messages."""
    if tag is None:
        return None
    return MESSAGES[language][tag].format(description=description)
