"""Instructions and prompts sent to the judge. Game text is Brazilian Portuguese."""
from .teams import team_label

TICKET_INSTRUCTIONS = (
    "Você cria chamados de suporte técnico fictícios para um jogo de perguntas e respostas. "
    "Responda sempre em português brasileiro."
)

TICKET_PROMPT = (
    "Crie um chamado de suporte fictício e plausível que será o estudo de caso de uma partida. "
    "Escreva um título curto e uma descrição com detalhes suficientes, sem ser longa. "
    "Descreva o problema como um usuário final, evitando jargão técnico. "
    "Varie os temas: aplicativos de banco, streaming, lojas virtuais, jogos, ERPs, "
    "Windows, Android, iOS e afins. "
    "Escolha um nível de dificuldade ('easy', 'medium' ou 'hard') pensando nos níveis de suporte "
    "(N1, N2, N3), sem mencionar o nível no texto do chamado. "
    "Responda apenas em JSON: {\"title\": string, \"description\": string, \"difficulty\": string}."
)

JUDGE_INSTRUCTIONS = (
    "Você é um juiz especialista em suporte técnico em um jogo de perguntas e respostas. "
    "Responda sempre em português brasileiro."
)

SUMMARY_INSTRUCTIONS = (
    "Você é um comentarista esportivo empolgado. Responda sempre em português brasileiro."
)

MISSING_TICKET = "Detalhes do chamado de suporte não encontrados."


def format_ticket(title, description):
    return f"Título: {title}\n\nDescrição: {description}"


def judge_prompt(ticket, team, text, current_round, max_rounds):
    label = team_label(team)
    return (
        f"Chamado de Suporte:\n{ticket or MISSING_TICKET}\n\n"
        f"O time {label} propõe: {text}\n\n"
        f"Esta é a rodada {current_round} de {max_rounds}. Leve isso em conta na avaliação.\n\n"
        f"Avalie a proposta com uma nota de 0 a 10 e dê uma dica (feedback) para o time {label}. "
        "A dica deve apontar algo que está certo ou errado, sem entregar a solução inteira, "
        "incentivando os times a pensar mais, a menos que a resposta já resolva o problema.\n\n"
        "Responda em JSON: {\"score\": número, \"feedback\": string, \"isTheAnswerPerfect\": booleano}. "
        "isTheAnswerPerfect deve ser true apenas se a resposta for perfeita e resolver o problema. "
        "O feedback deve ter no máximo 3 linhas."
    )


def transcript(messages):
    """Pair each player message with the judge message after it."""
    lines = []
    for i in range(0, len(messages) - 1, 2):
        player_msg, judge_msg = messages[i], messages[i + 1]
        lines.append(
            f"[{team_label(player_msg.get('team'))}] {player_msg.get('nickname', '')}: {player_msg.get('text', '')}\n"
            f"Juiz: {judge_msg.get('text', '')} (Nota: {judge_msg.get('score', 0)})"
        )
    return '\n'.join(lines)


def summary_prompt(ticket, messages, team_a_score, team_b_score):
    return (
        "Resumo da partida do Supp Trivia!\n\n"
        f"Chamado de Suporte:\n{ticket or '(Sem chamado de suporte)'}\n\n"
        f"Placar final: {team_label('A')} {team_a_score} x {team_b_score} {team_label('B')}\n\n"
        f"Transcrição das rodadas:\n{transcript(messages)}\n\n"
        "Faça um resumo divertido e descontraído da partida, destacando os melhores momentos "
        "e o time vencedor, e termine com uma frase de efeito."
    )
