"""
Slack emoji short names to Unicode.

Generated from the Slack/emoji-datasource short-name list, restricted to
the emoji people actually react with. The first name listed for a given
character is its canonical name when converting back to Slack.
"""

EMOJI_BY_NAME: dict[str, str] = {
    # Smileys
    "grinning": "😀",
    "smiley": "😃",
    "smile": "😄",
    "grin": "😁",
    "laughing": "😆",
    "satisfied": "😆",
    "sweat_smile": "😅",
    "rolling_on_the_floor_laughing": "🤣",
    "joy": "😂",
    "slightly_smiling_face": "🙂",
    "upside_down_face": "🙃",
    "wink": "😉",
    "blush": "😊",
    "innocent": "😇",
    "smiling_face_with_3_hearts": "🥰",
    "heart_eyes": "😍",
    "star-struck": "🤩",
    "kissing_heart": "😘",
    "kissing": "😗",
    "relaxed": "☺️",
    "kissing_closed_eyes": "😚",
    "kissing_smiling_eyes": "😙",
    "yum": "😋",
    "stuck_out_tongue": "😛",
    "stuck_out_tongue_winking_eye": "😜",
    "zany_face": "🤪",
    "stuck_out_tongue_closed_eyes": "😝",
    "money_mouth_face": "🤑",
    "hugging_face": "🤗",
    "face_with_hand_over_mouth": "🤭",
    "shushing_face": "🤫",
    "thinking_face": "🤔",
    "thinking": "🤔",
    "zipper_mouth_face": "🤐",
    "face_with_raised_eyebrow": "🤨",
    "neutral_face": "😐",
    "expressionless": "😑",
    "no_mouth": "😶",
    "smirk": "😏",
    "unamused": "😒",
    "face_with_rolling_eyes": "🙄",
    "grimacing": "😬",
    "lying_face": "🤥",
    "relieved": "😌",
    "pensive": "😔",
    "sleepy": "😪",
    "drooling_face": "🤤",
    "sleeping": "😴",
    "mask": "😷",
    "face_with_thermometer": "🤒",
    "face_with_head_bandage": "🤕",
    "nauseated_face": "🤢",
    "face_vomiting": "🤮",
    "sneezing_face": "🤧",
    "hot_face": "🥵",
    "cold_face": "🥶",
    "woozy_face": "🥴",
    "dizzy_face": "😵",
    "exploding_head": "🤯",
    "face_with_cowboy_hat": "🤠",
    "partying_face": "🥳",
    "sunglasses": "😎",
    "nerd_face": "🤓",
    "face_with_monocle": "🧐",
    "confused": "😕",
    "worried": "😟",
    "slightly_frowning_face": "🙁",
    "white_frowning_face": "☹️",
    "open_mouth": "😮",
    "hushed": "😯",
    "astonished": "😲",
    "flushed": "😳",
    "pleading_face": "🥺",
    "frowning": "😦",
    "anguished": "😧",
    "fearful": "😨",
    "cold_sweat": "😰",
    "disappointed_relieved": "😥",
    "cry": "😢",
    "sob": "😭",
    "scream": "😱",
    "confounded": "😖",
    "persevere": "😣",
    "disappointed": "😞",
    "sweat": "😓",
    "weary": "😩",
    "tired_face": "😫",
    "yawning_face": "🥱",
    "triumph": "😤",
    "rage": "😡",
    "pout": "😡",
    "angry": "😠",
    "face_with_symbols_on_mouth": "🤬",
    "smiling_imp": "😈",
    "imp": "👿",
    "skull": "💀",
    "skull_and_crossbones": "☠️",
    "hankey": "💩",
    "poop": "💩",
    "shit": "💩",
    "clown_face": "🤡",
    "japanese_ogre": "👹",
    "japanese_goblin": "👺",
    "ghost": "👻",
    "alien": "👽",
    "space_invader": "👾",
    "robot_face": "🤖",
    "smiley_cat": "😺",
    "smile_cat": "😸",
    "joy_cat": "😹",
    "heart_eyes_cat": "😻",
    "smirk_cat": "😼",
    "kissing_cat": "😽",
    "scream_cat": "🙀",
    "crying_cat_face": "😿",
    "pouting_cat": "😾",
    "see_no_evil": "🙈",
    "hear_no_evil": "🙉",
    "speak_no_evil": "🙊",
    # Hearts and symbols of feeling
    "kiss": "💋",
    "love_letter": "💌",
    "cupid": "💘",
    "gift_heart": "💝",
    "sparkling_heart": "💖",
    "heartpulse": "💗",
    "heartbeat": "💓",
    "revolving_hearts": "💞",
    "two_hearts": "💕",
    "heart_decoration": "💟",
    "heavy_heart_exclamation_mark_ornament": "❣️",
    "broken_heart": "💔",
    "heart": "❤️",
    "orange_heart": "🧡",
    "yellow_heart": "💛",
    "green_heart": "💚",
    "blue_heart": "💙",
    "purple_heart": "💜",
    "brown_heart": "🤎",
    "black_heart": "🖤",
    "white_heart": "🤍",
    "100": "💯",
    "anger": "💢",
    "boom": "💥",
    "collision": "💥",
    "dizzy": "💫",
    "sweat_drops": "💦",
    "dash": "💨",
    "hole": "🕳️",
    "bomb": "💣",
    "speech_balloon": "💬",
    "eye-in-speech-bubble": "👁️‍🗨️",
    "left_speech_bubble": "🗨️",
    "right_anger_bubble": "🗯️",
    "thought_balloon": "💭",
    "zzz": "💤",
    # Hands and people
    "wave": "👋",
    "raised_back_of_hand": "🤚",
    "raised_hand_with_fingers_splayed": "🖐️",
    "hand": "✋",
    "raised_hand": "✋",
    "spock-hand": "🖖",
    "ok_hand": "👌",
    "pinching_hand": "🤏",
    "v": "✌️",
    "crossed_fingers": "🤞",
    "i_love_you_hand_sign": "🤟",
    "the_horns": "🤘",
    "sign_of_the_horns": "🤘",
    "call_me_hand": "🤙",
    "point_left": "👈",
    "point_right": "👉",
    "point_up_2": "👆",
    "middle_finger": "🖕",
    "point_down": "👇",
    "point_up": "☝️",
    "+1": "👍",
    "thumbsup": "👍",
    "-1": "👎",
    "thumbsdown": "👎",
    "fist": "✊",
    "facepunch": "👊",
    "punch": "👊",
    "left-facing_fist": "🤛",
    "right-facing_fist": "🤜",
    "clap": "👏",
    "raised_hands": "🙌",
    "open_hands": "👐",
    "palms_up_together": "🤲",
    "handshake": "🤝",
    "pray": "🙏",
    "writing_hand": "✍️",
    "nail_care": "💅",
    "selfie": "🤳",
    "muscle": "💪",
    "ear": "👂",
    "nose": "👃",
    "brain": "🧠",
    "eyes": "👀",
    "eye": "👁️",
    "tongue": "👅",
    "lips": "👄",
    "baby": "👶",
    "child": "🧒",
    "boy": "👦",
    "girl": "👧",
    "adult": "🧑",
    "man": "👨",
    "woman": "👩",
    "older_adult": "🧓",
    "older_man": "👴",
    "older_woman": "👵",
    "person_frowning": "🙍",
    "person_with_pouting_face": "🙎",
    "no_good": "🙅",
    "ok_woman": "🙆",
    "information_desk_person": "💁",
    "raising_hand": "🙋",
    "bow": "🙇",
    "face_palm": "🤦",
    "facepalm": "🤦",
    "shrug": "🤷",
    "ninja": "🥷",
    "superhero": "🦸",
    "mage": "🧙",
    "zombie": "🧟",
    "runner": "🏃",
    "running": "🏃",
    "dancer": "💃",
    "man_dancing": "🕺",
    "walking": "🚶",
    "busts_in_silhouette": "👥",
    "bust_in_silhouette": "👤",
    "footprints": "👣",
    # Animals and nature
    "monkey_face": "🐵",
    "monkey": "🐒",
    "dog": "🐶",
    "wolf": "🐺",
    "fox_face": "🦊",
    "cat": "🐱",
    "lion_face": "🦁",
    "tiger": "🐯",
    "horse": "🐴",
    "unicorn_face": "🦄",
    "cow": "🐮",
    "pig": "🐷",
    "mouse": "🐭",
    "hamster": "🐹",
    "rabbit": "🐰",
    "bear": "🐻",
    "koala": "🐨",
    "panda_face": "🐼",
    "chicken": "🐔",
    "penguin": "🐧",
    "bird": "🐦",
    "eagle": "🦅",
    "duck": "🦆",
    "owl": "🦉",
    "frog": "🐸",
    "turtle": "🐢",
    "snake": "🐍",
    "dragon": "🐉",
    "whale": "🐳",
    "dolphin": "🐬",
    "fish": "🐟",
    "tropical_fish": "🐠",
    "octopus": "🐙",
    "shark": "🦈",
    "snail": "🐌",
    "butterfly": "🦋",
    "bug": "🐛",
    "ant": "🐜",
    "bee": "🐝",
    "honeybee": "🐝",
    "ladybug": "🐞",
    "spider": "🕷️",
    "crab": "🦀",
    "bouquet": "💐",
    "cherry_blossom": "🌸",
    "rose": "🌹",
    "sunflower": "🌻",
    "tulip": "🌷",
    "seedling": "🌱",
    "evergreen_tree": "🌲",
    "deciduous_tree": "🌳",
    "palm_tree": "🌴",
    "cactus": "🌵",
    "herb": "🌿",
    "four_leaf_clover": "🍀",
    "maple_leaf": "🍁",
    "fallen_leaf": "🍂",
    "mushroom": "🍄",
    # Sky and weather
    "earth_africa": "🌍",
    "earth_americas": "🌎",
    "earth_asia": "🌏",
    "new_moon": "🌑",
    "full_moon": "🌕",
    "crescent_moon": "🌙",
    "sunny": "☀️",
    "star": "⭐",
    "star2": "🌟",
    "stars": "🌠",
    "cloud": "☁️",
    "partly_sunny": "⛅",
    "thunder_cloud_and_rain": "⛈️",
    "rainbow": "🌈",
    "umbrella": "☂️",
    "zap": "⚡",
    "snowflake": "❄️",
    "snowman": "☃️",
    "fire": "🔥",
    "droplet": "💧",
    "ocean": "🌊",
    "tornado": "🌪️",
    # Food and drink
    "apple": "🍎",
    "green_apple": "🍏",
    "pear": "🍐",
    "tangerine": "🍊",
    "lemon": "🍋",
    "banana": "🍌",
    "watermelon": "🍉",
    "grapes": "🍇",
    "strawberry": "🍓",
    "cherries": "🍒",
    "peach": "🍑",
    "pineapple": "🍍",
    "avocado": "🥑",
    "eggplant": "🍆",
    "hot_pepper": "🌶️",
    "corn": "🌽",
    "bread": "🍞",
    "cheese_wedge": "🧀",
    "hamburger": "🍔",
    "fries": "🍟",
    "pizza": "🍕",
    "hotdog": "🌭",
    "taco": "🌮",
    "burrito": "🌯",
    "popcorn": "🍿",
    "sushi": "🍣",
    "ramen": "🍜",
    "spaghetti": "🍝",
    "doughnut": "🍩",
    "cookie": "🍪",
    "birthday": "🎂",
    "cake": "🍰",
    "cupcake": "🧁",
    "chocolate_bar": "🍫",
    "candy": "🍬",
    "lollipop": "🍭",
    "coffee": "☕",
    "tea": "🍵",
    "beer": "🍺",
    "beers": "🍻",
    "clinking_glasses": "🥂",
    "wine_glass": "🍷",
    "tropical_drink": "🍹",
    "champagne": "🍾",
    "cup_with_straw": "🥤",
    # Activities and celebration
    "jack_o_lantern": "🎃",
    "christmas_tree": "🎄",
    "fireworks": "🎆",
    "sparkler": "🎇",
    "sparkles": "✨",
    "balloon": "🎈",
    "tada": "🎉",
    "confetti_ball": "🎊",
    "gift": "🎁",
    "ribbon": "🎀",
    "trophy": "🏆",
    "sports_medal": "🏅",
    "first_place_medal": "🥇",
    "second_place_medal": "🥈",
    "third_place_medal": "🥉",
    "soccer": "⚽",
    "baseball": "⚾",
    "basketball": "🏀",
    "football": "🏈",
    "tennis": "🎾",
    "bowling": "🎳",
    "dart": "🎯",
    "video_game": "🎮",
    "game_die": "🎲",
    "jigsaw": "🧩",
    "chess_pawn": "♟️",
    "art": "🎨",
    "performing_arts": "🎭",
    "microphone": "🎤",
    "headphones": "🎧",
    "musical_note": "🎵",
    "notes": "🎶",
    "guitar": "🎸",
    "musical_keyboard": "🎹",
    "trumpet": "🎺",
    "drum_with_drumsticks": "🥁",
    "clapper": "🎬",
    # Travel and places
    "rocket": "🚀",
    "airplane": "✈️",
    "helicopter": "🚁",
    "car": "🚗",
    "red_car": "🚗",
    "taxi": "🚕",
    "bus": "🚌",
    "ambulance": "🚑",
    "fire_engine": "🚒",
    "police_car": "🚓",
    "bike": "🚲",
    "ship": "🚢",
    "anchor": "⚓",
    "construction": "🚧",
    "rotating_light": "🚨",
    "vertical_traffic_light": "🚦",
    "house": "🏠",
    "office": "🏢",
    "hospital": "🏥",
    "school": "🏫",
    "tent": "⛺",
    "globe_with_meridians": "🌐",
    "world_map": "🗺️",
    "hourglass": "⌛",
    "hourglass_flowing_sand": "⏳",
    "watch": "⌚",
    "alarm_clock": "⏰",
    "stopwatch": "⏱️",
    "clock1": "🕐",
    # Objects
    "iphone": "📱",
    "computer": "💻",
    "keyboard": "⌨️",
    "desktop_computer": "🖥️",
    "printer": "🖨️",
    "floppy_disk": "💾",
    "cd": "💿",
    "camera": "📷",
    "movie_camera": "🎥",
    "tv": "📺",
    "radio": "📻",
    "telephone_receiver": "📞",
    "battery": "🔋",
    "electric_plug": "🔌",
    "bulb": "💡",
    "flashlight": "🔦",
    "candle": "🕯️",
    "moneybag": "💰",
    "dollar": "💵",
    "credit_card": "💳",
    "gem": "💎",
    "wrench": "🔧",
    "hammer": "🔨",
    "hammer_and_wrench": "🛠️",
    "gear": "⚙️",
    "nut_and_bolt": "🔩",
    "link": "🔗",
    "paperclip": "📎",
    "scissors": "✂️",
    "lock": "🔒",
    "unlock": "🔓",
    "key": "🔑",
    "mag": "🔍",
    "mag_right": "🔎",
    "microscope": "🔬",
    "telescope": "🔭",
    "pill": "💊",
    "syringe": "💉",
    "dna": "🧬",
    "test_tube": "🧪",
    "shield": "🛡️",
    "crystal_ball": "🔮",
    "magnet": "🧲",
    "broom": "🧹",
    "shopping_trolley": "🛒",
    "package": "📦",
    "email": "📧",
    "envelope": "✉️",
    "incoming_envelope": "📨",
    "inbox_tray": "📥",
    "outbox_tray": "📤",
    "mailbox": "📫",
    "pencil": "📝",
    "memo": "📝",
    "pencil2": "✏️",
    "pen": "🖊️",
    "black_nib": "✒️",
    "briefcase": "💼",
    "file_folder": "📁",
    "open_file_folder": "📂",
    "date": "📅",
    "calendar": "📆",
    "spiral_calendar_pad": "🗓️",
    "card_index": "📇",
    "chart_with_upwards_trend": "📈",
    "chart_with_downwards_trend": "📉",
    "bar_chart": "📊",
    "clipboard": "📋",
    "pushpin": "📌",
    "round_pushpin": "📍",
    "straight_ruler": "📏",
    "triangular_ruler": "📐",
    "books": "📚",
    "book": "📖",
    "open_book": "📖",
    "bookmark": "🔖",
    "label": "🏷️",
    "newspaper": "📰",
    "bell": "🔔",
    "no_bell": "🔕",
    "loudspeaker": "📢",
    "mega": "📣",
    "trash": "🗑️",
    "wastebasket": "🗑️",
    "hourglass_done": "⌛",
    "crown": "👑",
    "eyeglasses": "👓",
    "dark_sunglasses": "🕶️",
    "necktie": "👔",
    "shirt": "👕",
    "tshirt": "👕",
    "jeans": "👖",
    "dress": "👗",
    "tophat": "🎩",
    "mortar_board": "🎓",
    "lipstick": "💄",
    "ring": "💍",
    "handbag": "👜",
    "moyai": "🗿",
    # Symbols
    "white_check_mark": "✅",
    "heavy_check_mark": "✔️",
    "ballot_box_with_check": "☑️",
    "x": "❌",
    "negative_squared_cross_mark": "❎",
    "heavy_plus_sign": "➕",
    "heavy_minus_sign": "➖",
    "heavy_division_sign": "➗",
    "heavy_multiplication_x": "✖️",
    "question": "❓",
    "grey_question": "❔",
    "exclamation": "❗",
    "heavy_exclamation_mark": "❗",
    "grey_exclamation": "❕",
    "bangbang": "‼️",
    "interrobang": "⁉️",
    "warning": "⚠️",
    "no_entry": "⛔",
    "no_entry_sign": "🚫",
    "stop_sign": "🛑",
    "children_crossing": "🚸",
    "recycle": "♻️",
    "infinity": "♾️",
    "copyright": "©️",
    "registered": "®️",
    "tm": "™️",
    "information_source": "ℹ️",
    "ok": "🆗",
    "new": "🆕",
    "free": "🆓",
    "up": "🆙",
    "cool": "🆒",
    "sos": "🆘",
    "top": "🔝",
    "soon": "🔜",
    "back": "🔙",
    "end": "🔚",
    "on": "🔛",
    "arrow_up": "⬆️",
    "arrow_down": "⬇️",
    "arrow_left": "⬅️",
    "arrow_right": "➡️",
    "arrow_upper_right": "↗️",
    "arrow_lower_right": "↘️",
    "arrow_lower_left": "↙️",
    "arrow_upper_left": "↖️",
    "arrows_counterclockwise": "🔄",
    "arrows_clockwise": "🔃",
    "leftwards_arrow_with_hook": "↩️",
    "arrow_right_hook": "↪️",
    "twisted_rightwards_arrows": "🔀",
    "repeat": "🔁",
    "fast_forward": "⏩",
    "rewind": "⏪",
    "arrow_forward": "▶️",
    "arrow_backward": "◀️",
    "double_vertical_bar": "⏸️",
    "black_square_for_stop": "⏹️",
    "red_circle": "🔴",
    "large_orange_circle": "🟠",
    "large_yellow_circle": "🟡",
    "large_green_circle": "🟢",
    "large_blue_circle": "🔵",
    "large_purple_circle": "🟣",
    "black_circle": "⚫",
    "white_circle": "⚪",
    "red_square": "🟥",
    "large_green_square": "🟩",
    "large_blue_square": "🟦",
    "black_large_square": "⬛",
    "white_large_square": "⬜",
    "small_red_triangle": "🔺",
    "small_red_triangle_down": "🔻",
    "large_orange_diamond": "🔶",
    "large_blue_diamond": "🔷",
    "diamond_shape_with_a_dot_inside": "💠",
    "radio_button": "🔘",
    "checkered_flag": "🏁",
    "triangular_flag_on_post": "🚩",
    "crossed_flags": "🎌",
    "waving_black_flag": "🏴",
    "waving_white_flag": "🏳️",
    "rainbow-flag": "🏳️‍🌈",
    "pirate_flag": "🏴‍☠️",
    "zero": "0️⃣",
    "one": "1️⃣",
    "two": "2️⃣",
    "three": "3️⃣",
    "four": "4️⃣",
    "five": "5️⃣",
    "six": "6️⃣",
    "seven": "7️⃣",
    "eight": "8️⃣",
    "nine": "9️⃣",
    "keycap_ten": "🔟",
    "hash": "#️⃣",
    "keycap_star": "*️⃣",
    "abc": "🔤",
    "1234": "🔢",
    "symbols": "🔣",
    "capital_abcd": "🔠",
    "abcd": "🔡",
    "peace_symbol": "☮️",
    "yin_yang": "☯️",
    "atom_symbol": "⚛️",
    "medical_symbol": "⚕️",
    "beginner": "🔰",
    "trident": "🔱",
    "o": "⭕",
    "name_badge": "📛",
    "vibration_mode": "📳",
    "mobile_phone_off": "📴",
    "signal_strength": "📶",
    "wifi": "🛜",
    "eyes_speech": "👁️‍🗨️",
    "handshake_heart": "🫶",
    "heart_hands": "🫶",
    "saluting_face": "🫡",
    "melting_face": "🫠",
    "face_holding_back_tears": "🥹",
    "dotted_line_face": "🫥",
    "pleading": "🥺",
}
