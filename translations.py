LANGUAGES = {"en": "English", "sw": "Kiswahili", "luo": "Dholuo"}

# Keys missing for a language fall back to English
STRINGS = {
    "en": {
        "title": "Risk Assessment",
        "intro_title": "Check Your Risk Level",
        "intro_desc": "This tool analyzes your location in Kenya, environmental factors, and symptoms to estimate your risk of Schistosomiasis.",
        "place_prompt": "Your village, town or area",
        "btn_start": "Start Assessment",
        "access_gps": "Accessing GPS...",
        "loc_found": "Location Found!",
        "gps_denied": "GPS access denied.",
        "env_title": "Environment",
        "risk_zone": "High Risk Zone Detected",
        "q_near_water": "Do you live near a lake, river, or dam (<500m)?",
        "q_stagnant": "Is the water stagnant or slow-moving?",
        "act_title": "Activities & Lifestyle",
        "q_occ": "Occupation",
        "q_water_contact": "Water Contact Activities",
        "q_latrine": "Do you have a latrine at home?",
        "symp_title": "Symptoms",
        "q_blood": "Blood in Urine?",
        "q_pain": "Pain while urinating?",
        "q_age": "Age",
        "snail_title": "Snail Identification (Beta)",
        "snail_desc": "If you see a snail near water, take a picture.",
        "snap": "Snap/Upload Snail",
        "analyzing": "Analyzing...",
        "calc": "Calculate Risk",
        "next": "Next",
        "back": "Back",
        "factors": "Key Risk Factors:",
        "no_factors": "No major risk factors detected.",
        "start_over": "Start Over",
        "disclaimer": "This score is an informational estimate, not a diagnosis. Please visit a health facility for testing.",
        "btn_manual": "Enter manually",
        "place_example": "e.g., Kisumu",
        "nearest_zones": "Nearest risk zones",
        "col_zone": "Zone",
        "col_distance": "Distance (km)",
        "col_inside": "Inside",
        "try_again": "Try again",
        "step_of": "Step {index}/{total}",
        "assistant_title": "Schisto-Care Assistant",
        "sign_in_to_chat": "Sign in on the Account page to chat with the assistant.",
        "conversations": "Conversations",
        "new_chat": "New chat",
        "attach": "Attach a photo or text file",
        "attach_help": "Images and text files are read by the assistant.",
        "ask_placeholder": "Ask about schistosomiasis...",
        "thinking": "Thinking...",
        "prompts_left": "{count} free prompts left",
        "upgrade_hint": "Upgrade to Premium on the Account page to keep chatting.",
        "account_title": "Account",
        "email": "Email",
        "continue": "Continue",
        "plan": "Plan",
        "premium": "Premium",
        "free_trial": "Free Trial",
        "prompts_used": "Prompts used",
        "choose_plan": "Choose your plan",
        "upgrade_plan": "Upgrade ({plan})",
        "subscription": "Subscription: {plan}",
        "saved_conversations": "Saved conversations",
        "sign_out": "Sign Out",
        "language": "Language",
        "navigate": "Navigate",
        "page_risk": "Risk Assessment",
        "page_assistant": "Assistant",
        "page_account": "Account",
    },
    "sw": {
        "title": "Tathmini ya Hatari",
        "intro_title": "Angalia Kiwango Chako cha Hatari",
        "intro_desc": "Chombo hiki huchambua eneo lako nchini Kenya, mazingira, na dalili kukadiria hatari yako ya Kichocho.",
        "btn_start": "Anza",
        "access_gps": "Inatafuta GPS...",
        "loc_found": "Eneo Limepatikana!",
        "env_title": "Mazingira",
        "risk_zone": "Eneo la Hatari",
        "q_near_water": "Unaishi karibu na ziwa, mto au bwawa?",
        "q_stagnant": "Je, maji yametwama?",
        "act_title": "Shughuli na Maisha",
        "q_occ": "Kazi",
        "q_water_contact": "Kugusa Maji",
        "q_latrine": "Una choo nyumbani?",
        "symp_title": "Dalili",
        "q_blood": "Damu kwenye mkojo?",
        "q_pain": "Maumivu wakati wa kukojoa?",
        "q_age": "Umri",
        "snail_title": "Utambuzi wa Konokono",
        "snail_desc": "Piga picha ukiona konokono.",
        "snap": "Piga/Pakia Picha",
        "calc": "Kadiria Hatari",
        "next": "Endelea",
        "back": "Nyuma",
        "factors": "Sababu za Hatari:",
        "start_over": "Anza Upya",
        "btn_manual": "Weka mwenyewe",
        "nearest_zones": "Maeneo ya hatari yaliyo karibu",
        "try_again": "Jaribu tena",
        "step_of": "Hatua {index}/{total}",
        "sign_in_to_chat": "Ingia kwenye ukurasa wa Akaunti ili kuzungumza na msaidizi.",
        "conversations": "Mazungumzo",
        "new_chat": "Mazungumzo mapya",
        "attach": "Ambatisha picha au faili ya maandishi",
        "ask_placeholder": "Uliza kuhusu kichocho...",
        "thinking": "Inafikiri...",
        "prompts_left": "Maswali {count} ya bure yamebaki",
        "account_title": "Akaunti",
        "email": "Barua pepe",
        "continue": "Endelea",
        "plan": "Mpango",
        "choose_plan": "Chagua mpango wako",
        "saved_conversations": "Mazungumzo yaliyohifadhiwa",
        "sign_out": "Toka",
        "language": "Lugha",
        "page_risk": "Tathmini ya Hatari",
        "page_assistant": "Msaidizi",
        "page_account": "Akaunti",
    },
    "luo": {
        "title": "Pimo Masira",
        "intro_title": "Pim Kaka Masira Romo",
        "intro_desc": "Watiyo gi location mari, aluorami, kod ranyisi mondo wane ka intie e masira mar Kichocho.",
        "btn_start": "Chak",
        "access_gps": "Manyo GPS...",
        "loc_found": "Location Oyudore!",
        "gps_denied": "GPS ok oyudore.",
        "env_title": "Aluora",
        "risk_zone": "Ka en kuonde masira",
        "q_near_water": "Idak machiegni gi nam, aora, kata dam?",
        "q_stagnant": "Pi obedo ma ok mol?",
        "act_title": "Tich kod Dak",
        "q_occ": "Tich",
        "q_water_contact": "Tich e Pi",
        "q_latrine": "Un gi choo e dala?",
        "symp_title": "Ranyisi",
        "q_blood": "Remo e lach?",
        "q_pain": "Remo ka ilayo?",
        "q_age": "Higa",
        "snail_title": "Fwenyo Kamongo",
        "snail_desc": "Go picha ka ineno kamongo.",
        "snap": "Go/Or Picha",
        "calc": "Pim Masira",
        "next": "Dhi Nyime",
        "back": "Cen",
        "factors": "Gik makelo Masira:",
        "start_over": "Chak Manyien",
        "btn_manual": "Ket in iwuon",
        "try_again": "Tem kendo",
        "conversations": "Mbaka",
        "sign_out": "Wuogi",
    },
}

OCCUPATION_LABELS = {
    "unspecified": "Select...",
    "farmer": "Farmer (Mkulima/Japur)",
    "fisherman": "Fisherman (Mvuvi/Jaluo)",
    "student": "Student (Mwanafunzi/Japuonjre)",
    "other": "Other (Nyingine/Machelo)",
}


def t(key: str, language: str = "en") -> str:
    table = STRINGS.get(language, STRINGS["en"])
    return table.get(key) or STRINGS["en"][key]
