"""Static class and subclass name alias tables.

Keys are normalized names (see dnd_tracker.names.resolver.normalize_key):
lowercase, no diacritics, no parentheticals, single spaces. Values list the
spellings to try against the content repository, canonical spelling first.

Subclasses follow the 2024 rules, French names first, English names as
aliases.
"""

from __future__ import annotations

from dnd_tracker.models.enums import ClassId

# =============================================================================
# Classes
# =============================================================================

CLASS_IDS: dict[str, ClassId] = {
    "barbare": ClassId.BARBARIAN,
    "barde": ClassId.BARD,
    "clerc": ClassId.CLERIC,
    "druide": ClassId.DRUID,
    "ensorceleur": ClassId.SORCERER,
    "guerrier": ClassId.FIGHTER,
    "magicien": ClassId.WIZARD,
    "moine": ClassId.MONK,
    "occultiste": ClassId.WARLOCK,
    "paladin": ClassId.PALADIN,
    "rodeur": ClassId.RANGER,
    "roublard": ClassId.ROGUE,
}

CLASS_ALIASES: dict[str, tuple[str, ...]] = {
    "barbare": ("Barbare", "Barbarian"),
    "barde": ("Barde", "Bard"),
    "clerc": ("Clerc", "Cleric", "Prêtre", "Pretre", "Prêtres"),
    "druide": ("Druide", "Druid"),
    "ensorceleur": ("Ensorceleur", "Sorcerer", "Sorceror"),
    "guerrier": ("Guerrier", "Fighter"),
    "magicien": ("Magicien", "Wizard", "Mage"),
    "moine": ("Moine", "Monk"),
    # "Sorcier" is the modern French name of the warlock
    "occultiste": ("Occultiste", "Warlock", "Sorcier"),
    "paladin": ("Paladin",),
    "rodeur": ("Rôdeur", "Rodeur", "Ranger"),
    "roublard": ("Roublard", "Voleur", "Rogue", "Thief"),
}

# =============================================================================
# Subclasses
# =============================================================================

SUBCLASS_ALIASES: dict[str, tuple[str, ...]] = {
    # Barbare
    "voie de l arbre monde": (
        "Voie de l’Arbre-Monde",
        "Voie de l arbre-monde",
        "Voie de l arbre monde",
        "Path of the World Tree",
    ),
    "voie du berserker": ("Voie du Berserker", "Berserker", "Path of the Berserker"),
    "voie du coeur sauvage": ("Voie du Cœur sauvage", "Voie du Coeur sauvage", "Path of the Wild Heart"),
    "voie du zelateur": ("Voie du Zélateur", "Voie du Zelateur", "Path of the Zealot"),
    # Barde
    "college de la danse": ("Collège de la Danse", "College de la Danse", "College of Dance"),
    "college du savoir": ("Collège du Savoir", "College du savoir", "College of Lore", "Lore"),
    "college de la seduction": (
        "Collège de la Séduction",
        "College de la Seduction",
        "College of Glamour",
        "Glamour",
    ),
    "college de la vaillance": (
        "Collège de la Vaillance",
        "College de la Vaillance",
        "College of Valor",
        "Valor",
    ),
    # Clerc
    "domaine de la guerre": ("Domaine de la Guerre", "War Domain"),
    "domaine de la lumiere": ("Domaine de la Lumière", "Light Domain"),
    "domaine de la ruse": ("Domaine de la Ruse", "Trickery Domain"),
    "domaine de la vie": ("Domaine de la Vie", "Life Domain"),
    # Druide
    "cercle des astres": ("Cercle des Astres", "Circle of Stars", "Stars"),
    "cercle de la lune": ("Cercle de la Lune", "Circle of the Moon", "Moon"),
    "cercle des mers": ("Cercle des Mers", "Circle of the Sea", "Sea"),
    "cercle de la terre": ("Cercle de la Terre", "Circle of the Land", "Land"),
    # Ensorceleur
    "sorcellerie aberrante": ("Sorcellerie aberrante", "Aberrant Sorcery", "Aberrant Mind"),
    "sorcellerie draconique": ("Sorcellerie draconique", "Magie draconique", "Draconic Sorcery"),
    "sorcellerie mecanique": ("Sorcellerie mécanique", "Clockwork Sorcery"),
    "sorcellerie sauvage": ("Sorcellerie sauvage", "Wild Magic Sorcery"),
    # Guerrier
    "champion": ("Champion", "Champion Fighter"),
    "chevalier occultiste": ("Chevalier occultiste", "Eldritch Knight"),
    "maitre de guerre": ("Maître de guerre", "Maitre de guerre", "Battle Master", "Battlemaster"),
    "soldat psi": ("Soldat psi", "Psi Warrior", "Psychic Warrior"),
    # Magicien
    "abjurateur": ("Abjurateur", "Abjuration", "School of Abjuration"),
    "devin": ("Devin", "Divination", "School of Divination"),
    "evocation": ("Évocation", "Evocation", "Évocateur", "School of Evocation"),
    "illusionniste": ("Illusionniste", "Illusion", "School of Illusion"),
    # Moine
    "credo des elements": ("Crédo des Éléments", "Credo des Elements", "Way of the Four Elements"),
    "credo de la misericorde": ("Crédo de la Miséricorde", "Credo de la Misericorde", "Way of Mercy"),
    "credo de l ombre": ("Crédo de l’Ombre", "Credo de l Ombre", "Way of Shadow", "Shadow"),
    "credo de la paume": (
        "Credo de la paume",
        "Crédo de la Paume",
        "Voie de la paume",
        "Voie de la main ouverte",
        "Way of the Open Hand",
        "Open Hand",
    ),
    # Occultiste
    "protecteur archifee": ("Protecteur Archifée", "Archfey", "The Archfey"),
    "protecteur celeste": ("Protecteur Céleste", "Celeste", "The Celestial", "Celestial"),
    "protecteur felon": ("Protecteur Félon", "Protecteur Felon", "The Fiend", "Fiend"),
    "protecteur grand ancien": ("Protecteur Grand Ancien", "The Great Old One", "Great Old One"),
    # Paladin
    "serment de gloire": ("Serment de Gloire", "Oath of Glory"),
    "serment des anciens": ("Serment des Anciens", "Oath of the Ancients"),
    "serment de devotion": ("Serment de Dévotion", "Serment de Devotion", "Oath of Devotion"),
    "serment de vengeance": ("Serment de Vengeance", "Oath of Vengeance"),
    # Rôdeur
    "belluaire": ("Belluaire", "Beast Master", "Beastmaster"),
    "chasseur": ("Chasseur", "Hunter"),
    "traqueur des tenebres": ("Traqueur des ténèbres", "Traqueur des tenebres", "Gloom Stalker"),
    "vagabond feerique": ("Vagabond féérique", "Vagabond feerique", "Fey Wanderer"),
    # Roublard
    "ame aceree": ("Âme acérée", "Ame aceree", "Soulknife"),
    "arnaqueur arcanique": ("Arnaqueur arcanique", "Arcane Trickster"),
    "assassin": ("Assassin",),
    "voleur": ("Voleur", "Thief"),
}


__all__ = [
    "CLASS_IDS",
    "CLASS_ALIASES",
    "SUBCLASS_ALIASES",
]
