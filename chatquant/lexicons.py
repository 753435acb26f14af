"""
Word lists for ChatQuant
Sentiment lexicon layers, function-word categories and marker phrase sets
(English with a Polish layer for inflected forms)
"""

from typing import Dict, FrozenSet, List, Tuple

# ============================================================================
# STOPWORDS (top-word tables exclude these)
# ============================================================================

STOPWORDS: FrozenSet[str] = frozenset([
    # English
    "i", "me", "my", "myself", "we", "our", "ours", "you", "your", "yours",
    "he", "him", "his", "she", "her", "hers", "it", "its", "they", "them",
    "their", "what", "which", "who", "whom", "this", "that", "these", "those",
    "am", "is", "are", "was", "were", "be", "been", "being", "have", "has",
    "had", "do", "does", "did", "a", "an", "the", "and", "but", "if", "or",
    "because", "as", "until", "while", "of", "at", "by", "for", "with",
    "about", "to", "from", "up", "down", "in", "out", "on", "off", "over",
    "then", "so", "than", "too", "very", "can", "will", "just", "dont", "im",
    "its", "thats", "not", "no", "yes", "ok", "okay", "oh", "like", "get",
    "got", "there", "here", "when", "where", "how", "all", "some", "also",
    # Polish
    "w", "z", "na", "do", "to", "je", "się", "sie", "nie", "że", "ze", "co",
    "tak", "za", "ale", "o", "od", "po", "jak", "już", "juz", "mi", "ty",
    "ja", "ten", "ta", "te", "go", "czy", "jest", "są", "był", "była",
    "ma", "mam", "no", "tu", "tam", "też", "tez", "bo", "tylko", "może",
    "moze", "a", "u", "dobra", "xd",
])

# ============================================================================
# SENTIMENT LAYERS (first match wins, in this order)
# ============================================================================

# Layer 1: core English valence lexicon
CORE_LEXICON: Dict[str, float] = {
    # positive
    "love": 0.9, "loved": 0.9, "loving": 0.8, "lovely": 0.8, "adore": 0.9,
    "like": 0.4, "liked": 0.4, "enjoy": 0.6, "enjoyed": 0.6, "happy": 0.8,
    "glad": 0.6, "great": 0.8, "good": 0.6, "nice": 0.5, "awesome": 0.9,
    "amazing": 0.9, "wonderful": 0.9, "fantastic": 0.9, "perfect": 0.8,
    "beautiful": 0.8, "cute": 0.6, "sweet": 0.6, "fun": 0.6, "funny": 0.5,
    "excited": 0.7, "exciting": 0.7, "proud": 0.7, "thanks": 0.5,
    "thank": 0.5, "grateful": 0.8, "appreciate": 0.7, "miss": 0.3,
    "best": 0.8, "better": 0.4, "cool": 0.5, "yay": 0.7, "hope": 0.4,
    "care": 0.5, "support": 0.5, "kind": 0.6, "calm": 0.3, "safe": 0.4,
    "relaxed": 0.4, "laugh": 0.5, "smile": 0.6, "hug": 0.7, "hugs": 0.7,
    "kiss": 0.7, "brilliant": 0.8, "excellent": 0.9, "fine": 0.2,
    "agree": 0.3, "welcome": 0.4, "congrats": 0.8, "congratulations": 0.8,
    "win": 0.6, "won": 0.6, "success": 0.7, "trust": 0.6, "peace": 0.5,
    # negative
    "hate": -0.9, "hated": -0.9, "angry": -0.8, "mad": -0.6, "sad": -0.7,
    "upset": -0.7, "bad": -0.6, "worse": -0.7, "worst": -0.9,
    "terrible": -0.9, "awful": -0.9, "horrible": -0.9, "annoying": -0.6,
    "annoyed": -0.6, "tired": -0.3, "sick": -0.5, "hurt": -0.7,
    "hurts": -0.7, "pain": -0.7, "cry": -0.6, "crying": -0.6, "sorry": -0.2,
    "afraid": -0.6, "scared": -0.6, "worried": -0.5, "worry": -0.5,
    "stress": -0.6, "stressed": -0.6, "lonely": -0.7, "boring": -0.5,
    "bored": -0.4, "stupid": -0.7, "idiot": -0.8, "disappointed": -0.7,
    "disappointing": -0.7, "fail": -0.6, "failed": -0.6, "wrong": -0.5,
    "problem": -0.4, "problems": -0.4, "fight": -0.6, "fighting": -0.6,
    "ugly": -0.6, "jealous": -0.5, "sucks": -0.6, "ignore": -0.5,
    "ignored": -0.6, "ignoring": -0.6, "lie": -0.6, "lied": -0.7,
    "liar": -0.8, "selfish": -0.7, "rude": -0.6, "cruel": -0.8,
    "unfair": -0.6, "frustrated": -0.6, "furious": -0.9, "ashamed": -0.6,
    "guilty": -0.5, "blame": -0.6, "disgusting": -0.8, "miserable": -0.8,
}

# Layer 2: Polish base forms (looked up after suffix stripping)
POLISH_LEXICON: Dict[str, float] = {
    "kocham": 0.9, "kochać": 0.9, "kochany": 0.8, "kochana": 0.8,
    "szczęśliwy": 0.8, "szczesliwy": 0.8, "super": 0.7, "świetny": 0.8,
    "swietny": 0.8, "dobry": 0.6, "fajny": 0.5, "piękny": 0.8,
    "cudowny": 0.9, "wspaniały": 0.9, "dziękuję": 0.5, "dzięki": 0.5,
    "dzieki": 0.5, "uwielbiam": 0.9, "radosny": 0.7, "spokojny": 0.3,
    "miły": 0.6, "mily": 0.6, "tęsknię": 0.3, "zadowolony": 0.6,
    "nienawidzę": -0.9, "zły": -0.6, "zly": -0.6, "smutny": -0.7,
    "wkurzony": -0.8, "zdenerwowany": -0.7, "okropny": -0.9,
    "straszny": -0.8, "beznadziejny": -0.8, "głupi": -0.7, "glupi": -0.7,
    "zmęczony": -0.3, "zmeczony": -0.3, "chory": -0.5, "przykro": -0.4,
    "boli": -0.6, "problem": -0.4, "kłamiesz": -0.7, "zawiedziony": -0.7,
    "samotny": -0.7, "nudny": -0.5, "wstrętny": -0.8,
}

# Inflectional suffix -> nominative endings to retry (longest suffix first)
POLISH_SUFFIXES: List[Tuple[str, Tuple[str, ...]]] = [
    ("iemu", ("i", "y")), ("ego", ("y", "i")), ("emu", ("y", "i")),
    ("ych", ("y", "i")), ("ymi", ("y", "i")), ("ich", ("i", "y")),
    ("imi", ("i", "y")), ("ym", ("y",)), ("im", ("i",)), ("ej", ("a", "y")),
    ("ą", ("a", "y")), ("ie", ("a", "y")), ("e", ("y", "a")),
    ("ę", ("a",)), ("em", ("",)), ("ów", ("",)), ("om", ("",)),
]

# Layer 3: chat slang and emoticons
SLANG_LEXICON: Dict[str, float] = {
    "lol": 0.3, "lmao": 0.4, "haha": 0.4, "hahaha": 0.5, "hehe": 0.3,
    "xd": 0.4, "xdd": 0.4, "omg": 0.1, "yay": 0.7, "ugh": -0.5,
    "meh": -0.2, "wtf": -0.5, "ffs": -0.6, "smh": -0.4, "nvm": -0.1,
    "ily": 0.9, "luv": 0.8, "thx": 0.4, "ty": 0.4,
    ":)": 0.5, ":-)": 0.5, ":d": 0.6, ";)": 0.4, "<3": 0.8, ":*": 0.7,
    ":(": -0.5, ":-(": -0.5, ":/": -0.3, ":'(": -0.6, "</3": -0.8,
}

NEGATIONS: FrozenSet[str] = frozenset([
    "not", "never", "dont", "cant", "wont", "isnt", "arent", "wasnt",
    "werent", "hasnt", "havent", "doesnt", "didnt", "couldnt", "wouldnt",
    "shouldnt", "aint", "neither", "nor", "nothing", "nobody", "without",
    "nie", "bez", "ani",
])

# ============================================================================
# LANGUAGE STYLE MATCHING CATEGORIES
# ============================================================================

LSM_CATEGORIES: Dict[str, FrozenSet[str]] = {
    "personal_pronouns": frozenset([
        "i", "me", "my", "mine", "we", "us", "our", "you", "your", "yours",
        "he", "him", "his", "she", "her", "they", "them", "their",
        "ja", "mnie", "mi", "my", "nas", "ty", "ciebie", "cię", "ci", "on", "ona",
    ]),
    "prepositions": frozenset([
        "in", "on", "at", "to", "from", "with", "about", "for", "of", "by",
        "into", "over", "under", "after", "before", "between", "through",
        "w", "na", "z", "do", "od", "po", "przy", "przez", "dla", "o",
    ]),
    "conjunctions": frozenset([
        "and", "but", "or", "because", "so", "although", "though", "while",
        "if", "unless", "since", "whereas", "oraz", "ale", "lub", "albo",
        "bo", "więc", "wiec", "że", "ze", "jeśli", "jesli",
    ]),
    "adverbs": frozenset([
        "very", "really", "just", "still", "already", "always", "often",
        "sometimes", "usually", "again", "here", "there", "now", "then",
        "bardzo", "naprawdę", "naprawde", "już", "juz", "jeszcze", "zawsze",
        "często", "teraz", "potem",
    ]),
    "negations": frozenset([
        "not", "no", "never", "dont", "cant", "wont", "didnt", "doesnt",
        "isnt", "nothing", "nobody", "none", "nie", "nigdy", "nic", "nikt",
    ]),
    "quantifiers": frozenset([
        "all", "some", "many", "much", "few", "more", "most", "less", "every",
        "each", "any", "several", "lot", "lots", "wszystko", "wszyscy",
        "trochę", "troche", "dużo", "duzo", "mało", "kilka", "każdy",
    ]),
    "articles": frozenset(["a", "an", "the"]),
    "auxiliary_verbs": frozenset([
        "am", "is", "are", "was", "were", "be", "been", "being", "have", "has",
        "had", "do", "does", "did", "will", "would", "can", "could", "should",
        "shall", "may", "might", "must", "jest", "są", "był", "była", "będzie",
        "mogę", "może", "musisz",
    ]),
    "common_modifiers": frozenset([
        "so", "too", "quite", "pretty", "rather", "totally", "almost", "only",
        "even", "also", "tak", "też", "tez", "tylko", "nawet", "całkiem",
        "prawie", "strasznie",
    ]),
}

# ============================================================================
# PRONOUNS
# ============================================================================

I_WORDS: FrozenSet[str] = frozenset([
    "i", "me", "my", "mine", "myself", "im", "ive",
    "ja", "mnie", "mi", "mną", "mój", "moj", "moja", "moje", "moim", "mojej",
])
WE_WORDS: FrozenSet[str] = frozenset([
    "we", "us", "our", "ours", "ourselves", "weve",
    "nas", "nam", "nami", "nasz", "nasza", "nasze", "naszym", "naszej",
])
YOU_WORDS: FrozenSet[str] = frozenset([
    "you", "your", "yours", "yourself", "yourselves", "youre", "youve", "youll",
    "ty", "ciebie", "cię", "cie", "ci", "tobie", "tobą", "twój", "twoj",
    "twoja", "twoje", "wy", "wam",
])

# ============================================================================
# TIME ORIENTATION (unigrams, bigrams, trigrams)
# ============================================================================

PAST_MARKERS: FrozenSet[str] = frozenset([
    "yesterday", "last week", "last month", "last year", "ago", "used to",
    "back then", "in the past", "previously", "was", "were", "had", "did",
    "went", "said", "thought", "felt", "knew", "remember when",
    "wczoraj", "kiedyś", "dawniej", "ostatnio", "było", "byłem", "byłam",
    "miałem", "miałam", "pamiętam", "wtedy",
])
PRESENT_MARKERS: FrozenSet[str] = frozenset([
    "now", "today", "currently", "at the moment", "right now", "these days",
    "am", "is", "are", "have", "has", "do", "does",
    "teraz", "dziś", "dzisiaj", "aktualnie", "obecnie", "właśnie",
    "jestem", "jest", "jesteś", "mam", "masz", "robię",
])
FUTURE_MARKERS: FrozenSet[str] = frozenset([
    "tomorrow", "next week", "next month", "next year", "soon", "eventually",
    "someday", "one day", "in the future", "will", "wont", "gonna",
    "going to", "plan to", "planning", "intend", "want to", "hope to",
    "looking forward", "cant wait",
    "jutro", "pojutrze", "wkrótce", "niedługo", "planuję", "zamierzam",
    "będę", "będziesz", "będzie", "będziemy", "mam nadzieję",
])

# ============================================================================
# INTEGRATIVE COMPLEXITY PHRASES
# ============================================================================

DIFFERENTIATION_PHRASES: Tuple[str, ...] = (
    "on the other hand", "on one hand", "however", "although",
    "but at the same time", "nevertheless", "nonetheless", "even though",
    "alternatively", "in contrast", "whereas", "admittedly", "true but",
    "fair enough but", "you have a point but", "i see your point but",
    "z drugiej strony", "z jednej strony", "jednak", "mimo to", "chociaż",
    "natomiast", "masz rację ale", "rozumiem ale",
)
INTEGRATION_PHRASES: Tuple[str, ...] = (
    "taking into account", "taking everything into account",
    "all things considered", "therefore", "as a result", "in conclusion",
    "it follows that", "which means that", "putting it together",
    "weighing both sides", "balancing these", "consequently",
    "biorąc pod uwagę", "w związku z tym", "podsumowując", "wynika z tego",
    "co oznacza że",
)

# ============================================================================
# BIDS FOR CONNECTION
# ============================================================================

DISCLOSURE_STARTERS: Tuple[str, ...] = (
    "listen", "you know what", "i wanted to tell", "i need to tell",
    "guess what", "something happened", "you will not believe",
    "i have to tell you", "remember when",
    "słuchaj", "wiesz co", "pamiętasz", "muszę ci", "powiem ci",
)
INVITATION_MARKERS: Tuple[str, ...] = (
    "let's", "lets", "wanna", "want to", "shall we", "how about",
    "what about", "join me", "come over", "look at this", "check this",
    "check out", "chodźmy", "może byśmy", "zobacz", "patrz",
)
DISMISSIVE_PHRASES: Tuple[str, ...] = (
    "whatever", "forget it", "nevermind", "never mind", "don't care",
    "dont care", "who cares", "k", "ok", "okay", "sure", "mhm", "meh",
    "nieważne", "zapomnij", "daj spokój", "spoko", "kogo to obchodzi",
)

# ============================================================================
# PURSUIT DEMAND MARKERS
# ============================================================================

DEMAND_MARKERS: Tuple[str, ...] = (
    "hello?", "helloo", "hellooo", "answer me", "reply", "respond",
    "why aren't you", "why arent you", "are you there", "you there",
    "are you ignoring", "ignoring me", "call me", "text me back", "hey?",
    "halo", "odpisz", "odpowiedz", "czemu nie odpisujesz", "jesteś tam",
    "ignorujesz",
)
DEMAND_PUNCTUATION: Tuple[str, ...] = ("?", "??", "???", "????")

# ============================================================================
# CONFLICT LANGUAGE
# ============================================================================

ACCUSATORY_PHRASES: Tuple[str, ...] = (
    "you always", "you never", "it's your fault", "its your fault",
    "your fault", "you don't care", "you dont care", "you don't even",
    "you dont even", "why do you always", "how could you", "what is wrong with you",
    "what's wrong with you", "you made me", "i can't believe you",
    "i cant believe you", "stop lying", "you lied",
    "ty zawsze", "ty nigdy", "to twoja wina", "twoja wina", "nie obchodzi cię",
    "zawsze musisz", "jak mogłeś", "jak mogłaś",
)

PASSIVE_AGGRESSION_MARKERS: Tuple[str, ...] = (
    "ok", "okay", "k", "fine", "sure", "whatever", "nvm", "if you say so",
    "do what you want", "as you wish", "spoko", "dobra", "jak chcesz",
    "nieważne", "rób co chcesz", "aha", "mhm",
)
APOLOGY_MARKERS: Tuple[str, ...] = (
    "sorry", "i apologize", "my bad", "my fault", "forgive me", "you're right",
    "youre right", "i was wrong", "przepraszam", "sorki", "moja wina",
    "wybacz", "masz rację",
)
HUMOR_MARKERS: Tuple[str, ...] = (
    "haha", "hehe", "lol", "lmao", "xd", "😂", "🤣", "😅",
)
TOPIC_CHANGE_MARKERS: Tuple[str, ...] = (
    "anyway", "by the way", "btw", "speaking of", "changing the subject",
    "on another note", "a tak w ogóle", "swoją drogą", "zmieniając temat",
)
DEFLECTION_MARKERS: Tuple[str, ...] = (
    "whatever you say", "not my problem", "let's not", "lets not", "can we not",
    "drop it", "not now", "i don't want to talk about it", "i dont want to talk about it",
    "it's nothing", "its nothing", "doesn't matter", "doesnt matter", "calm down",
    "you're overreacting", "youre overreacting", "nie teraz", "zostaw to",
    "nie chcę o tym rozmawiać", "uspokój się", "przesadzasz",
)

# ============================================================================
# CONVERSATIONAL REPAIR
# ============================================================================

SELF_REPAIR_MARKERS: Tuple[str, ...] = (
    "i mean", "sorry i meant", "what i meant", "what i meant was", "wait no",
    "actually", "correction", "let me rephrase", "by that i mean", "to clarify",
    "no wait", "scratch that",
    "tzn", "tzn.", "to znaczy", "w sensie", "w sumie", "właściwie", "właściwie to",
    "miałem na myśli", "miałam na myśli", "chodzi mi o", "chcę powiedzieć",
    "mam na myśli", "raczej chodzi mi o", "przepraszam mówiłem", "przepraszam mówiłam",
    "nie nie", "nie tak", "czekaj", "zaraz", "poczekaj", "znaczy", "znaczy się",
    "no bo", "bo właśnie", "hmm nie", "ej nie", "poprawka", "cofnę się", "cofam się",
)
OTHER_REPAIR_MARKERS: Tuple[str, ...] = (
    "what?", "huh?", "i don't follow", "i don't understand", "what do you mean",
    "what does that mean", "can you explain", "can you clarify", "i'm confused",
    "come again", "say that again", "pardon?", "sorry what", "run that by me again",
    "co?", "hę?", "hę", "co masz na myśli", "co chcesz powiedzieć", "nie rozumiem",
    "o czym mówisz", "nie ogarniam", "nie za bardzo rozumiem", "możesz wytłumaczyć",
    "co to znaczy", "co to jest", "słucham?", "nie kapuję", "nie łapię", "serio?",
    "co ty piszesz", "co to ma znaczyć", "???", "hm?", "hmm?", "no i?",
    "i co z tego", "bo niby jak", "jak to",
)

# ============================================================================
# SHIFT / SUPPORT RESPONSES
# ============================================================================

SELF_START_TOKENS: FrozenSet[str] = frozenset([
    "i", "me", "my", "mine", "also", "anyway", "btw",
    "ja", "mi", "mnie", "mój", "moja", "moje", "mam", "miałem", "miałam", "u",
    "też", "tez", "zresztą", "właściwie", "swoją", "nawiasem", "moim", "mojej", "moich",
])
ACKNOWLEDGMENT_TOKENS: FrozenSet[str] = frozenset([
    "yeah", "yes", "right", "exactly", "true", "sure", "absolutely", "definitely",
    "totally", "seriously", "really", "wow", "omg",
    "tak", "no", "aha", "mhm", "dokładnie", "racja", "okej", "faktycznie",
    "właśnie", "serio", "naprawdę", "ojej", "matko", "kurde", "boże",
])
PARTNER_REFERENCE_TOKENS: FrozenSet[str] = frozenset([
    "you", "your", "yours", "yourself", "youre", "youve",
    "ty", "ci", "ciebie", "tobie", "twój", "twoja", "twoje", "twojej", "twoim",
])
QUESTION_START_TOKENS: FrozenSet[str] = frozenset([
    "what", "how", "when", "where", "why", "who", "which", "did", "do", "does",
    "is", "are", "was", "were", "will", "have", "can", "could", "would", "should",
    "co", "jak", "kiedy", "gdzie", "dlaczego", "czemu", "czy", "kto", "który",
    "która", "które", "ile", "skąd", "po",
])

# ============================================================================
# EMOTION VOCABULARY
# ============================================================================

EMOTION_CATEGORIES: Dict[str, FrozenSet[str]] = {
    "joy": frozenset([
        "happy", "happiness", "joy", "joyful", "glad", "pleased", "delighted", "cheerful",
        "great", "wonderful", "amazing", "fantastic", "awesome",
        "szczęśliwy", "szczęśliwa", "szczęście", "radość", "radosny", "radosna", "cieszę",
        "cieszy", "wesoły", "wesoła", "uśmiech", "śmieję", "fajnie", "super", "świetnie",
        "ekstra", "cudownie", "wspaniale",
    ]),
    "sadness": frozenset([
        "sad", "sadness", "unhappy", "depressed", "miserable", "crying", "hopeless",
        "heartbroken", "grief", "sorrow", "miss",
        "smutny", "smutna", "smutek", "smutno", "płaczę", "żal", "żałuję", "tęsknię",
        "tęsknota", "boli", "martwię", "ponuro",
    ]),
    "anger": frozenset([
        "angry", "anger", "furious", "rage", "mad", "annoyed", "irritated", "hate",
        "pissed", "livid", "enraged", "hatred",
        "zły", "zła", "złość", "wściekły", "wściekła", "wściekłość", "irytuje",
        "irytacja", "denerwuje", "nerwy", "nienawidzę", "nienawiść", "furia",
    ]),
    "fear": frozenset([
        "afraid", "fear", "scared", "terrified", "anxious", "worried", "nervous",
        "panic", "dread", "frightened", "horror",
        "boję", "strach", "straszny", "przerażony", "przerażona", "lęk", "niepokój",
        "panika", "nerwowy", "nerwowa", "stresuje",
    ]),
    "surprise": frozenset([
        "surprised", "shocking", "unexpected", "unbelievable", "omg", "seriously",
        "astonished", "amazed", "stunned", "whoa", "wow",
        "zaskoczony", "zaskoczona", "zaskoczenie", "niesamowite", "nie do wiary",
        "serio", "poważnie", "niemożliwe", "szok", "no nie",
    ]),
    "disgust": frozenset([
        "disgusting", "disgusted", "gross", "revolting", "yuck", "horrible", "nasty",
        "obrzydliwy", "obrzydliwa", "obrzydzenie", "ohydny", "fuj", "wstręt", "paskudny",
    ]),
    "anticipation": frozenset([
        "looking forward", "excited about", "anticipating", "hopeful", "eager",
        "czekam", "nie mogę się doczekać", "podekscytowany", "podekscytowana",
        "mam nadzieję", "planuję", "zamierzam",
    ]),
    "trust": frozenset([
        "trust", "rely", "believe", "confident", "safe", "secure", "loyal",
        "ufam", "zaufanie", "liczę na", "wierzę", "lojalny", "lojalna", "bezpiecznie",
        "spokojnie", "komfort",
    ]),
    "frustration": frozenset([
        "frustrated", "frustrating", "useless", "pointless", "again", "always",
        "frustracja", "sfrustrowany", "sfrustrowana", "nie działa", "bez sensu",
        "znowu", "zawsze tak samo", "nic nie wychodzi",
    ]),
    "affection": frozenset([
        "love", "adore", "cherish", "fond", "affectionate", "hugs", "kiss", "miss you",
        "darling", "sweetheart", "babe",
        "kocham", "lubię cię", "miłość", "ciepło", "blisko", "przytulić", "buzi",
        "całuję", "misiu", "kotku",
    ]),
    "loneliness": frozenset([
        "lonely", "alone", "isolated", "empty", "nobody",
        "samotny", "samotna", "samotność", "bez ciebie", "pusty", "pusta", "nikt", "nikogo",
    ]),
    "pride": frozenset([
        "proud", "accomplished", "achieved", "succeeded", "finally", "nailed it",
        "dumny", "dumna", "duma", "udało mi się", "osiągnąłem", "osiągnęłam",
        "nareszcie", "w końcu",
    ]),
}

# High-signal words for monthly closeness
INTIMACY_WORDS: FrozenSet[str] = frozenset([
    "love", "adore", "miss", "missing", "beautiful", "wonderful", "amazing", "gorgeous",
    "incredible", "fantastic", "happiness", "grateful", "thankful", "appreciate",
    "cherish", "sweetheart", "darling", "honey", "babe", "baby", "sweetie", "perfect",
    "blessed", "proud", "dream", "forever",
    "hate", "angry", "furious", "hurt", "crying", "depressed", "devastated",
    "heartbroken", "betrayed", "jealous", "lonely", "afraid", "scared", "disappointed",
    "miserable", "hopeless", "desperate", "broken",
    "kocham", "kochanie", "kochana", "kochany", "tęsknię", "tesknie", "cudownie",
    "szczęście", "pięknie", "przepraszam", "przytulam", "buziaki", "skarbie", "serce",
    "serduszko", "uwielbiam", "nienawidzę", "złość", "boli", "płaczę", "smutno",
    "smutna", "smutny", "żal", "samotna", "samotny", "strach", "boję", "ból",
])

# ============================================================================
# FOUR HORSEMEN
# ============================================================================

CRITICISM_MARKERS: Tuple[str, ...] = (
    "you always", "you never", "why can't you", "why cant you", "why do you always",
    "what is wrong with you", "what's wrong with you", "you don't even", "you dont even",
    "you're so", "youre so", "you only think about yourself", "you can't even",
    "ty zawsze", "ty nigdy", "dlaczego nigdy", "co jest z tobą nie tak",
    "zawsze musisz", "nigdy nie potrafisz",
)
CONTEMPT_MARKERS: Tuple[str, ...] = (
    "pathetic", "ridiculous", "you're pathetic", "grow up", "get a life", "loser",
    "idiot", "stupid", "lol ok", "sure jan", "as if", "oh please", "give me a break",
    "🙄", "żałosne", "żałosny", "żałosna", "śmieszne", "dorośnij", "idiota",
    "idiotka", "głupi", "głupia", "jasne jasne",
)
DEFENSIVENESS_MARKERS: Tuple[str, ...] = (
    "it's not my fault", "its not my fault", "not my fault", "i didn't do anything",
    "i didnt do anything", "that's not true", "thats not true", "what about you",
    "but you", "i was just", "don't blame me", "dont blame me", "i did nothing wrong",
    "you started it", "to nie moja wina", "nic nie zrobiłem", "nic nie zrobiłam",
    "a ty", "to nieprawda", "nie zwalaj na mnie", "ty zacząłeś", "ty zaczęłaś",
)
